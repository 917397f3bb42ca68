"""User-correctable copy of the extracted table."""

from ocr_gantt.schedule.derive import Task, derive_tasks
from ocr_gantt.table.reconstruct import Row, TableResult
from ocr_gantt.utils.config import ScheduleConfig
from ocr_gantt.utils.logger import get_logger

logger = get_logger(__name__)


class EditableTable:
    """Shallow copies of the extracted rows plus the tasks derived from them.

    Every cell edit re-runs :func:`derive_tasks` over the whole table. The
    tables here come from a single scanned page, so this stays cheap.

    Args:
        table: Reconstructed table to copy.
        config: Schedule settings used for derivation.
    """

    def __init__(self, table: TableResult, config: ScheduleConfig) -> None:
        self.config = config
        self.headers = list(table.headers)
        self._rows: list[Row] = [dict(row) for row in table.rows]
        self._tasks = derive_tasks(self._rows, config)

    @property
    def rows(self) -> list[Row]:
        return [dict(row) for row in self._rows]

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    def __len__(self) -> int:
        return len(self._rows)

    def edit_cell(self, row_index: int, key: str, value: str | None) -> list[Task]:
        """Replace one cell and re-derive the task list.

        The value is stored as given; bad dates or numbers surface as the
        derivation's fallbacks rather than as errors.

        Args:
            row_index: 0-based index into :attr:`rows`.
            key: Header of the cell. A new key adds a column to that row.
            value: New cell value.

        Returns:
            The freshly derived tasks.

        Raises:
            IndexError: If ``row_index`` is out of range.
        """
        if not 0 <= row_index < len(self._rows):
            raise IndexError(f"Row index {row_index} out of range (0..{len(self._rows) - 1})")

        self._rows[row_index][key] = value
        if key not in self.headers:
            self.headers.append(key)
        self._tasks = derive_tasks(self._rows, self.config)
        logger.debug("Edited row %d column %r; %d tasks", row_index, key, len(self._tasks))
        return self.tasks

    def to_table(self) -> TableResult:
        return TableResult(headers=list(self.headers), rows=self.rows)
