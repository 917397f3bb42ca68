"""Interactive state for one user working on one scanned sheet."""

from pathlib import Path

from ocr_gantt.ocr.image_loader import ImageLoadError
from ocr_gantt.ocr.tesseract_engine import RecognitionError
from ocr_gantt.pipeline import SchedulePipeline
from ocr_gantt.render.pdf_export import export_pdf
from ocr_gantt.render.timeline import TimelineRenderer
from ocr_gantt.schedule.derive import Task
from ocr_gantt.schedule.editing import EditableTable
from ocr_gantt.table.reconstruct import Row, TableResult
from ocr_gantt.utils.config import AppConfig
from ocr_gantt.utils.logger import get_logger

logger = get_logger(__name__)


class ScheduleSession:
    """Holds the latest upload, its editable table and the derived tasks.

    Each upload replaces the whole state. A failed recognition is logged
    and leaves the session empty instead of raising.

    Args:
        config: Application configuration object.
        pipeline: Pipeline to use; built from ``config`` when omitted.
    """

    def __init__(self, config: AppConfig, pipeline: SchedulePipeline | None = None) -> None:
        self.config = config
        self.pipeline = pipeline or SchedulePipeline(config)
        self.loading = False
        self.text = ""
        self.table = EditableTable(TableResult(), config.schedule)

    @property
    def rows(self) -> list[Row]:
        return self.table.rows

    @property
    def tasks(self) -> list[Task]:
        return self.table.tasks

    def upload(self, source: Path | bytes | str, filename: str = "document") -> list[Task]:
        """Recognize an image and replace the session state with its table.

        Returns:
            The derived tasks; empty when recognition failed.
        """
        self.loading = True
        try:
            result = self.pipeline.run(source, filename)
        except (RecognitionError, ImageLoadError) as exc:
            logger.error("Recognition failed for %s: %s", filename, exc)
            self.text = ""
            self.table = EditableTable(TableResult(), self.config.schedule)
            return []
        finally:
            self.loading = False

        self.text = result.text
        self.table = EditableTable(result.table, self.config.schedule)
        return self.tasks

    def edit_cell(self, row_index: int, key: str, value: str | None) -> list[Task]:
        """Correct one extracted cell; see :meth:`EditableTable.edit_cell`."""
        return self.table.edit_cell(row_index, key, value)

    def render_chart(self) -> bytes:
        """Render the current tasks to PNG bytes.

        Raises:
            ValueError: If there are no tasks.
        """
        return TimelineRenderer(self.config.chart).render(self.tasks)

    def export_pdf(self, output_path: Path | None = None) -> bytes:
        """Render the chart and place it on a one-page PDF.

        Args:
            output_path: Destination file; defaults to the configured
                filename in the working directory.
        """
        if output_path is None:
            output_path = Path(self.config.export.filename)
        return export_pdf(self.render_chart(), self.config.export, output_path)
