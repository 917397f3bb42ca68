"""Shared test fixtures for the scan-to-Gantt test suite."""

import io
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from ocr_gantt.schedule.derive import Task
from ocr_gantt.utils.config import AppConfig, ScheduleConfig

SAMPLE_TEXT = (
    "マテハン 開始 終了 数量 人数\n"
    "コンベア 2025/01/01 2025/01/03 240 2人\n"
    "\n"
    "リフター 2025/01/05 2025/01/10 2400 1人\n"
    "台車 2025/01/02\n"
)


@pytest.fixture
def png_bytes() -> bytes:
    """A minimal RGB PNG."""
    img = Image.fromarray(np.zeros((100, 200, 3), dtype=np.uint8))
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_TEXT


@pytest.fixture
def schedule_config() -> ScheduleConfig:
    return ScheduleConfig()


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig()


@pytest.fixture
def sample_tasks() -> list[Task]:
    return [
        Task(id="1", name="コンベア", start="2025-01-01", end="2025-01-03", progress=50.0),
        Task(id="2", name="リフター", start="2025-01-05", end="2025-01-10", progress=100.0),
    ]


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def config_dir(project_root: Path) -> Path:
    """Return the configs directory path."""
    return project_root / "configs"
