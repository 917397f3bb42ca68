"""End-to-end scan-to-schedule pipeline.

Chains image intake, preprocessing, Tesseract recognition, table
reconstruction and task derivation behind a single ``run`` call.
"""

from dataclasses import dataclass, field
from pathlib import Path

from ocr_gantt.ocr.image_loader import ImageLoader
from ocr_gantt.ocr.tesseract_engine import OCRResult, TesseractEngine
from ocr_gantt.preprocessing.pipeline import ScanPreprocessor
from ocr_gantt.schedule.columns import ColumnMapping
from ocr_gantt.schedule.derive import Task, derive_tasks
from ocr_gantt.table.reconstruct import TableResult, text_to_table
from ocr_gantt.utils.config import AppConfig
from ocr_gantt.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ScheduleResult:
    """Everything extracted from one uploaded image."""

    source_file: str
    ocr_result: OCRResult
    table: TableResult
    tasks: list[Task] = field(default_factory=list)

    @property
    def text(self) -> str:
        return self.ocr_result.text


class SchedulePipeline:
    """Turns a scanned schedule sheet into a table and a task list.

    Args:
        config: Application configuration object.
    """

    def __init__(self, config: AppConfig) -> None:
        self.config = config
        self.loader = ImageLoader(pdf_dpi=config.ocr.pdf_dpi)
        self.preprocessor = ScanPreprocessor(config.preprocessing)
        self.ocr_engine = TesseractEngine(
            tesseract_cmd=config.ocr.tesseract_cmd,
            default_lang=config.ocr.default_lang,
            psm=config.ocr.psm,
        )

    def recognize(self, source: Path | bytes | str, lang: str | None = None) -> OCRResult:
        """Load, clean up and recognize a document image.

        Raises:
            FileNotFoundError: If a path is given and does not exist.
            ImageLoadError: If the input is not a readable image.
            RecognitionError: If Tesseract fails.
        """
        image = self.loader.load(source)
        processed = self.preprocessor.process(image)
        return self.ocr_engine.recognize(processed, lang=lang)

    def build(self, ocr_result: OCRResult, filename: str = "document") -> ScheduleResult:
        """Reconstruct the table and derive tasks from recognized text."""
        table = text_to_table(ocr_result.text)
        if table.headers:
            mapping = ColumnMapping(self.config.schedule.columns)
            logger.debug("Column mapping: %s", mapping.resolve(table.headers))
        tasks = derive_tasks(table.rows, self.config.schedule)
        return ScheduleResult(
            source_file=filename,
            ocr_result=ocr_result,
            table=table,
            tasks=tasks,
        )

    def run(
        self,
        source: Path | bytes | str,
        filename: str = "document",
        lang: str | None = None,
    ) -> ScheduleResult:
        """Process one document image end to end.

        Args:
            source: Path, raw bytes or ``data:`` URL of the image.
            filename: Display name for logging and results.
            lang: Tesseract language hint; defaults to the configured one.

        Returns:
            The recognized text, reconstructed table and derived tasks.
        """
        logger.info("Processing schedule image: %s", filename)
        result = self.build(self.recognize(source, lang=lang), filename)
        logger.info(
            "%s: %d rows, %d tasks",
            filename,
            len(result.table.rows),
            len(result.tasks),
        )
        return result
