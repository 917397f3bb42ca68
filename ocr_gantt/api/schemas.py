"""Pydantic request/response schemas for the FastAPI endpoints."""

from typing import Annotated

from pydantic import BaseModel, BeforeValidator, Field


def _number_to_text(value: object) -> object:
    """Accept numeric cells from JSON clients; rows hold text internally."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


CellValue = Annotated[str | None, BeforeValidator(_number_to_text)]


class TaskSchema(BaseModel):
    """A derived Gantt task."""

    id: str
    name: str
    start: str
    end: str
    progress: float = Field(ge=0, le=100)
    dependencies: str = ""


class ScheduleResponse(BaseModel):
    """Response for an uploaded schedule image."""

    success: bool
    document_id: str
    filename: str
    raw_text: str
    ocr_confidence: float
    headers: list[str]
    rows: list[dict[str, CellValue]]
    tasks: list[TaskSchema]
    processing_time_ms: float


class DeriveRequest(BaseModel):
    """Rows to derive tasks from."""

    rows: list[dict[str, CellValue]]


class DeriveResponse(BaseModel):
    tasks: list[TaskSchema]


class CellEdit(BaseModel):
    """A single cell correction."""

    row_index: int
    key: str
    value: CellValue = None


class EditRequest(BaseModel):
    """Current editable rows plus the cell to change."""

    headers: list[str] = Field(default_factory=list)
    rows: list[dict[str, CellValue]]
    edit: CellEdit


class EditResponse(BaseModel):
    headers: list[str]
    rows: list[dict[str, CellValue]]
    tasks: list[TaskSchema]


class ChartRequest(BaseModel):
    """Tasks to render or export."""

    tasks: list[TaskSchema]


class ColumnsResponse(BaseModel):
    """The configured header synonyms per semantic field."""

    required_key: str | None
    columns: dict[str, list[str]]


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    tesseract_available: bool
