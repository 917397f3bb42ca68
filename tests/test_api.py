"""Tests for the FastAPI REST endpoints."""

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from ocr_gantt.api.app import app
from ocr_gantt.ocr.tesseract_engine import OCRResult, RecognitionError
from ocr_gantt.pipeline import SchedulePipeline, ScheduleResult
from ocr_gantt.utils.config import AppConfig, ChartConfig

ROWS = [
    {"マテハン": "コンベア", "開始": "2025/01/01", "終了": "2025/01/03", "数量": "240", "人数": "2人"},
    {"マテハン": "台車", "開始": "2025/01/02", "終了": None, "数量": None, "人数": None},
]

TASKS = [
    {"id": "1", "name": "コンベア", "start": "2025-01-01", "end": "2025-01-03", "progress": 50.0},
]


@pytest.fixture
def client() -> TestClient:
    """Create a FastAPI test client."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def small_charts():
    """Render charts at low resolution to keep the tests fast."""
    with patch(
        "ocr_gantt.api.app._get_config",
        return_value=AppConfig(chart=ChartConfig(dpi=72)),
    ):
        yield


def _mock_result(text: str = "マテハン 開始 終了\nA 2025/01/01 2025/01/03") -> ScheduleResult:
    ocr = OCRResult(text=text, language="jpn", confidence=0.87, word_count=6)
    return SchedulePipeline(AppConfig()).build(ocr, "scan.png")


class TestHealthEndpoint:
    """Tests for the /health endpoint."""

    def test_health_returns_ok(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert isinstance(data["tesseract_available"], bool)


class TestColumnsEndpoint:
    """Tests for the /columns endpoint."""

    def test_lists_mapping(self, client: TestClient) -> None:
        data = client.get("/columns").json()
        assert data["required_key"] == "マテハン"
        assert "開始" in data["columns"]["start"]


class TestScheduleEndpoint:
    """Tests for the /schedule upload endpoint."""

    @patch("ocr_gantt.api.app._get_pipeline")
    def test_upload_success(
        self, mock_pipeline: MagicMock, client: TestClient, png_bytes: bytes
    ) -> None:
        mock_pipeline.return_value.run.return_value = _mock_result()

        response = client.post(
            "/schedule",
            files={"file": ("scan.png", png_bytes, "image/png")},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["headers"] == ["マテハン", "開始", "終了"]
        assert data["rows"][0]["マテハン"] == "A"
        assert data["tasks"] == [
            {
                "id": "1",
                "name": "A",
                "start": "2025-01-01",
                "end": "2025-01-03",
                "progress": 0.0,
                "dependencies": "",
            }
        ]
        assert data["ocr_confidence"] == pytest.approx(0.87)
        assert "processing_time_ms" in data

    @patch("ocr_gantt.api.app._get_pipeline")
    def test_language_hint(
        self, mock_pipeline: MagicMock, client: TestClient, png_bytes: bytes
    ) -> None:
        mock_pipeline.return_value.run.return_value = _mock_result()
        client.post(
            "/schedule?lang=jpn%2Beng",
            files={"file": ("scan.jpg", png_bytes, "image/jpeg")},
        )
        assert mock_pipeline.return_value.run.call_args.kwargs["lang"] == "jpn+eng"

    def test_unsupported_file_type(self, client: TestClient) -> None:
        response = client.post(
            "/schedule",
            files={"file": ("notes.txt", b"plain text", "text/plain")},
        )
        assert response.status_code == 400

    @patch("ocr_gantt.api.app._get_pipeline")
    def test_recognition_failure(
        self, mock_pipeline: MagicMock, client: TestClient, png_bytes: bytes
    ) -> None:
        mock_pipeline.return_value.run.side_effect = RecognitionError("tesseract crashed")
        response = client.post(
            "/schedule",
            files={"file": ("scan.png", png_bytes, "image/png")},
        )
        assert response.status_code == 500
        assert "tesseract crashed" in response.json()["detail"]

    @patch("ocr_gantt.api.app._get_pipeline")
    def test_single_line_text(
        self, mock_pipeline: MagicMock, client: TestClient, png_bytes: bytes
    ) -> None:
        mock_pipeline.return_value.run.return_value = _mock_result("見出しだけ")
        data = client.post(
            "/schedule",
            files={"file": ("scan.png", png_bytes, "image/png")},
        ).json()
        assert data["rows"] == []
        assert data["tasks"] == []


class TestDeriveAndEdit:
    """Tests for /schedule/derive and /schedule/edit."""

    def test_derive(self, client: TestClient) -> None:
        response = client.post("/schedule/derive", json={"rows": ROWS})
        assert response.status_code == 200
        tasks = response.json()["tasks"]
        assert len(tasks) == 1
        assert tasks[0]["progress"] == 50.0

    def test_edit_rederives(self, client: TestClient) -> None:
        response = client.post(
            "/schedule/edit",
            json={"rows": ROWS, "edit": {"row_index": 1, "key": "終了", "value": "2025/01/04"}},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["rows"][1]["終了"] == "2025/01/04"
        assert [t["name"] for t in data["tasks"]] == ["コンベア", "台車"]
        assert data["headers"] == ["マテハン", "開始", "終了", "数量", "人数"]

    def test_edit_matches_derive(self, client: TestClient) -> None:
        edited = client.post(
            "/schedule/edit",
            json={"rows": ROWS, "edit": {"row_index": 0, "key": "人数", "value": "4人"}},
        ).json()
        derived = client.post("/schedule/derive", json={"rows": edited["rows"]}).json()
        assert edited["tasks"] == derived["tasks"]

    def test_derive_numeric_cells(self, client: TestClient) -> None:
        rows = [
            {"マテハン": "コンベア", "開始": "2025/01/01", "終了": "2025/01/03", "数量": 240, "人数": 2},
        ]
        response = client.post("/schedule/derive", json={"rows": rows})
        assert response.status_code == 200
        assert response.json()["tasks"][0]["progress"] == 50.0

    def test_edit_numeric_cells(self, client: TestClient) -> None:
        rows = [
            {"マテハン": "コンベア", "開始": "2025/01/01", "終了": "2025/01/03", "数量": 240.0, "人数": 2},
        ]
        response = client.post(
            "/schedule/edit",
            json={"rows": rows, "edit": {"row_index": 0, "key": "人数", "value": 4}},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["rows"][0]["人数"] == "4"
        assert data["rows"][0]["数量"] == "240.0"
        assert data["tasks"][0]["progress"] == 25.0

    def test_edit_bad_index(self, client: TestClient) -> None:
        response = client.post(
            "/schedule/edit",
            json={"rows": ROWS, "edit": {"row_index": 5, "key": "終了", "value": "x"}},
        )
        assert response.status_code == 400


class TestChartEndpoints:
    """Tests for /chart and /export/pdf."""

    def test_chart_png(self, client: TestClient) -> None:
        response = client.post("/chart", json={"tasks": TASKS})
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.content.startswith(b"\x89PNG")

    def test_chart_empty(self, client: TestClient) -> None:
        assert client.post("/chart", json={"tasks": []}).status_code == 400

    def test_chart_bad_date(self, client: TestClient) -> None:
        bad = [dict(TASKS[0], start="not-a-date")]
        assert client.post("/chart", json={"tasks": bad}).status_code == 400

    def test_progress_out_of_range_rejected(self, client: TestClient) -> None:
        bad = [dict(TASKS[0], progress=150)]
        assert client.post("/chart", json={"tasks": bad}).status_code == 422

    def test_export_pdf(self, client: TestClient) -> None:
        response = client.post("/export/pdf", json={"tasks": TASKS})
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert 'filename="gantt_chart.pdf"' in response.headers["content-disposition"]
        assert response.content.startswith(b"%PDF")

    def test_export_empty(self, client: TestClient) -> None:
        assert client.post("/export/pdf", json={"tasks": []}).status_code == 400
