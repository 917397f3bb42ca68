"""Derive Gantt tasks from reconstructed table rows.

:func:`derive_tasks` is a pure function of its inputs. The initial upload
and every manual edit call it the same way, so an edited table always
yields the tasks a fresh derivation of that table would.
"""

from dataclasses import asdict, dataclass
from datetime import date

from ocr_gantt.schedule.columns import (
    ColumnMapping,
    find_date_token,
    parse_date,
    parse_quantity,
    parse_workers,
)
from ocr_gantt.table.reconstruct import Row
from ocr_gantt.utils.config import ScheduleConfig
from ocr_gantt.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class Task:
    """A single bar on the timeline."""

    id: str
    name: str
    start: str
    end: str
    progress: float
    dependencies: str = ""

    def to_dict(self) -> dict[str, object]:
        return asdict(self)

    @property
    def start_date(self) -> date:
        return date.fromisoformat(self.start)

    @property
    def end_date(self) -> date:
        return date.fromisoformat(self.end)


def has_required_key(row: Row, required_key: str | None) -> bool:
    """True when the row carries a non-blank value under ``required_key``."""
    if required_key is None:
        return True
    value = row.get(required_key)
    return value is not None and bool(str(value).strip())


def select_date_tokens(row: Row, mapping: ColumnMapping) -> tuple[str | None, str | None]:
    """Pick the start and end date tokens for a row.

    Mapped ``start``/``end`` columns are tried first. Whatever is still
    missing is filled by scanning the row's cells in header order, the
    first unused date-like token becoming start and the next end.
    """
    start_key = mapping.find_key(row, "start")
    end_key = mapping.find_key(row, "end")
    start = find_date_token(row[start_key]) if start_key else None
    end = find_date_token(row[end_key]) if end_key else None
    if start and end:
        return start, end

    used = {k for k, token in ((start_key, start), (end_key, end)) if token}
    for key, value in row.items():
        if key in used:
            continue
        token = find_date_token(value)
        if token is None:
            continue
        if start is None:
            start = token
        elif end is None:
            end = token
            break
    return start, end


def estimate_progress(
    row: Row,
    mapping: ColumnMapping,
    config: ScheduleConfig,
    start: date,
    end: date,
) -> float:
    """Estimate completion as workload days over the task's date span.

    ``quantity / throughput_per_hour / workers`` gives hours of work, which
    is converted to days and divided by the inclusive span. The result is
    clamped to [0, 100]; missing or non-positive inputs give 0.
    """
    quantity = parse_quantity(mapping.lookup(row, "quantity"))
    workers = parse_workers(mapping.lookup(row, "workers"), config.worker_suffixes)
    if quantity is None or workers is None or quantity <= 0 or workers <= 0:
        return 0.0
    if config.throughput_per_hour <= 0 or config.hours_per_day <= 0:
        return 0.0

    hours = quantity / config.throughput_per_hour / workers
    days = hours / config.hours_per_day
    span = max((end - start).days + 1, 1)
    progress = days / span * 100
    return round(min(max(progress, 0.0), 100.0), 1)


def derive_tasks(rows: list[Row], config: ScheduleConfig) -> list[Task]:
    """Build the task list for a table.

    Rows lacking the required key, or lacking a start or end date token,
    are skipped. Date tokens that are not valid calendar dates fall back to
    the configured defaults.

    Args:
        rows: Table rows keyed by header.
        config: Column mapping and constants.

    Returns:
        Tasks in row order; ``id`` is the row's 1-based position.
    """
    mapping = ColumnMapping(config.columns)
    default_start = date.fromisoformat(config.default_start)
    default_end = date.fromisoformat(config.default_end)
    tasks: list[Task] = []

    for position, row in enumerate(rows, start=1):
        if not has_required_key(row, config.required_key):
            continue

        start_token, end_token = select_date_tokens(row, mapping)
        if start_token is None or end_token is None:
            logger.debug("Row %d has no start/end date; skipped", position)
            continue

        start = parse_date(start_token, config.date_formats) or default_start
        end = parse_date(end_token, config.date_formats) or default_end

        tasks.append(
            Task(
                id=str(position),
                name=mapping.lookup(row, "name") or f"Task {position}",
                start=start.isoformat(),
                end=end.isoformat(),
                progress=estimate_progress(row, mapping, config, start, end),
            )
        )

    logger.info("Derived %d tasks from %d rows", len(tasks), len(rows))
    return tasks
