"""FastAPI application for the scan-to-Gantt service.

Exposes upload-and-extract, re-derivation after manual edits, chart
rendering and PDF export.
"""

import shutil
import time
import uuid
from typing import Annotated

from fastapi import FastAPI, File, HTTPException, Query, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from ocr_gantt.api.schemas import (
    ChartRequest,
    ColumnsResponse,
    DeriveRequest,
    DeriveResponse,
    EditRequest,
    EditResponse,
    HealthResponse,
    ScheduleResponse,
    TaskSchema,
)
from ocr_gantt.pipeline import SchedulePipeline
from ocr_gantt.render.pdf_export import export_pdf
from ocr_gantt.render.timeline import TimelineRenderer
from ocr_gantt.schedule.derive import Task, derive_tasks
from ocr_gantt.schedule.editing import EditableTable
from ocr_gantt.table.reconstruct import TableResult
from ocr_gantt.utils.config import AppConfig, load_config
from ocr_gantt.utils.logger import get_logger

logger = get_logger(__name__)

VERSION = "0.1.0"

app = FastAPI(
    title="Scan to Gantt API",
    description="Turn a photographed schedule sheet into an editable Gantt chart",
    version=VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _get_config() -> AppConfig:
    return load_config()


def _get_pipeline() -> SchedulePipeline:
    """Build the pipeline from the current configuration."""
    return SchedulePipeline(_get_config())


def _to_schemas(tasks: list[Task]) -> list[TaskSchema]:
    return [TaskSchema(**task.to_dict()) for task in tasks]


def _to_tasks(schemas: list[TaskSchema]) -> list[Task]:
    return [Task(**schema.model_dump()) for schema in schemas]


def _is_allowed_upload(content_type: str | None) -> bool:
    if not content_type:
        return True
    return content_type.startswith("image/") or content_type in (
        "application/pdf",
        "application/octet-stream",
    )


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return system health status."""
    return HealthResponse(
        status="healthy",
        version=VERSION,
        tesseract_available=shutil.which("tesseract") is not None,
    )


@app.get("/columns", response_model=ColumnsResponse)
async def list_columns() -> ColumnsResponse:
    """List the header synonyms used to map table columns to task fields."""
    schedule = _get_config().schedule
    return ColumnsResponse(required_key=schedule.required_key, columns=schedule.columns)


@app.post("/schedule", response_model=ScheduleResponse)
async def extract_schedule(
    file: Annotated[UploadFile, File(...)],
    lang: Annotated[str | None, Query()] = None,
) -> ScheduleResponse:
    """Recognize an uploaded schedule image and derive its tasks.

    Args:
        file: Uploaded image (any image type) or scanned PDF.
        lang: Tesseract language hint, e.g. ``jpn`` or ``jpn+eng``.

    Returns:
        Recognized text, reconstructed rows and derived tasks.
    """
    start_time = time.time()

    if not _is_allowed_upload(file.content_type):
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type: {file.content_type}",
        )

    try:
        pipeline = _get_pipeline()
        content = await file.read()
        result = pipeline.run(content, file.filename or "document", lang=lang)
    except Exception as exc:
        logger.error("Schedule extraction failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return ScheduleResponse(
        success=True,
        document_id=str(uuid.uuid4()),
        filename=result.source_file,
        raw_text=result.text,
        ocr_confidence=result.ocr_result.confidence,
        headers=result.table.headers,
        rows=result.table.rows,
        tasks=_to_schemas(result.tasks),
        processing_time_ms=(time.time() - start_time) * 1000,
    )


@app.post("/schedule/derive", response_model=DeriveResponse)
async def derive(request: DeriveRequest) -> DeriveResponse:
    """Derive tasks from a table of rows."""
    tasks = derive_tasks(request.rows, _get_config().schedule)
    return DeriveResponse(tasks=_to_schemas(tasks))


@app.post("/schedule/edit", response_model=EditResponse)
async def edit_cell(request: EditRequest) -> EditResponse:
    """Apply one cell correction and return the re-derived tasks."""
    headers = request.headers or (list(request.rows[0]) if request.rows else [])
    table = EditableTable(
        TableResult(headers=headers, rows=request.rows), _get_config().schedule
    )
    try:
        tasks = table.edit_cell(request.edit.row_index, request.edit.key, request.edit.value)
    except IndexError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return EditResponse(headers=table.headers, rows=table.rows, tasks=_to_schemas(tasks))


def _render(request: ChartRequest, config: AppConfig) -> bytes:
    try:
        return TimelineRenderer(config.chart).render(_to_tasks(request.tasks))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.post("/chart")
async def render_chart(request: ChartRequest) -> Response:
    """Render tasks as a PNG timeline."""
    png = _render(request, _get_config())
    return Response(content=png, media_type="image/png")


@app.post("/export/pdf")
async def export_chart_pdf(request: ChartRequest) -> Response:
    """Render tasks and return the chart as a one-page PDF download."""
    config = _get_config()
    pdf = export_pdf(_render(request, config), config.export)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{config.export.filename}"'
        },
    )
