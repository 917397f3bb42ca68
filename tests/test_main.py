"""Tests for the API server entry point."""

from pathlib import Path
from unittest.mock import MagicMock, patch

from ocr_gantt.main import main


class TestMain:
    """Tests for host and port selection."""

    @patch("ocr_gantt.main.uvicorn.run")
    def test_uses_config_server_section(self, mock_run: MagicMock, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("server:\n  host: 127.0.0.1\n  port: 9100\n", encoding="utf-8")
        main(["-c", str(path)])
        _, kwargs = mock_run.call_args
        assert kwargs == {"host": "127.0.0.1", "port": 9100}

    @patch("ocr_gantt.main.uvicorn.run")
    def test_command_line_overrides(self, mock_run: MagicMock, tmp_path: Path) -> None:
        main(["-c", str(tmp_path / "missing.yaml"), "--host", "localhost", "--port", "8123"])
        _, kwargs = mock_run.call_args
        assert kwargs == {"host": "localhost", "port": 8123}

    @patch("ocr_gantt.main.uvicorn.run")
    def test_defaults(self, mock_run: MagicMock, tmp_path: Path) -> None:
        main(["-c", str(tmp_path / "missing.yaml")])
        _, kwargs = mock_run.call_args
        assert kwargs == {"host": "0.0.0.0", "port": 8000}
