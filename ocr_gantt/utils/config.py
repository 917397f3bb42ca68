"""Configuration for the scan-to-Gantt pipeline.

Every section is a pydantic model with working defaults, so a missing or
partial ``configs/config.yaml`` still yields a usable configuration.
"""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("configs/config.yaml")


class OCRConfig(BaseModel):
    """Settings for the Tesseract recognition service."""

    tesseract_cmd: str | None = None
    default_lang: str = "jpn"
    psm: int = 6
    pdf_dpi: int = 300


class PreprocessingConfig(BaseModel):
    """Clean-up steps applied to a scan before recognition."""

    enabled: bool = True
    deskew_enabled: bool = True
    denoise_enabled: bool = True
    denoise_kernel: int = 3
    binarize_enabled: bool = True


def _default_columns() -> dict[str, list[str]]:
    return {
        "name": ["マテハン", "作業名", "工程", "タスク", "名称", "name", "task"],
        "start": ["開始", "開始日", "着手", "start"],
        "end": ["終了", "終了日", "完了", "end"],
        "quantity": ["数量", "個数", "台数", "qty", "quantity"],
        "workers": ["人数", "作業者", "人員", "workers"],
    }


class ScheduleConfig(BaseModel):
    """Column mapping and constants used to turn table rows into tasks."""

    required_key: str | None = "マテハン"
    columns: dict[str, list[str]] = Field(default_factory=_default_columns)
    throughput_per_hour: float = 10.0
    hours_per_day: float = 8.0
    worker_suffixes: list[str] = Field(default_factory=lambda: ["人", "名"])
    date_formats: list[str] = Field(
        default_factory=lambda: [
            "%Y/%m/%d",
            "%Y-%m-%d",
            "%Y.%m.%d",
            "%Y年%m月%d日",
            "%Y年%m月%d",
        ]
    )
    default_start: str = "2025-01-01"
    default_end: str = "2025-01-02"


class ChartConfig(BaseModel):
    """Timeline rendering options."""

    view_mode: str = "Day"
    column_width: int = 30
    locale: str = "ja"
    date_format: str = "%Y-%m-%d"
    dpi: int = 150
    row_height: float = 0.4
    font_family: list[str] = Field(
        default_factory=lambda: [
            "Noto Sans CJK JP",
            "IPAexGothic",
            "IPAGothic",
            "DejaVu Sans",
        ]
    )


class ExportConfig(BaseModel):
    """PDF export options."""

    filename: str = "gantt_chart.pdf"
    page_size: str = "A4"


class ServerConfig(BaseModel):
    """Where the HTTP API listens."""

    host: str = "0.0.0.0"
    port: int = 8000


class AppConfig(BaseModel):
    """Top-level application configuration."""

    ocr: OCRConfig = Field(default_factory=OCRConfig)
    preprocessing: PreprocessingConfig = Field(default_factory=PreprocessingConfig)
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)
    chart: ChartConfig = Field(default_factory=ChartConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    log_level: str = "INFO"


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.
            Defaults to configs/config.yaml.

    Returns:
        Validated application configuration.
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH

    if path.exists():
        logger.info("Loading configuration from %s", path)
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        return AppConfig(**raw)

    logger.info("No config file found at %s, using defaults", path)
    return AppConfig()
