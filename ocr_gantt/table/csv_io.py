"""CSV round-trip for reconstructed tables, used to hand-edit a scan offline."""

import csv
from pathlib import Path

from ocr_gantt.table.reconstruct import Row, TableResult
from ocr_gantt.utils.logger import get_logger

logger = get_logger(__name__)


def write_table_csv(table: TableResult, output_path: Path) -> None:
    """Write headers and rows to a UTF-8 CSV file; ``None`` cells are left blank.

    Args:
        table: Table to write.
        output_path: Destination file. Parent directories are created.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    # utf-8-sig so spreadsheet apps pick up the Japanese headers
    with open(output_path, "w", newline="", encoding="utf-8-sig") as f:
        writer = csv.writer(f)
        writer.writerow(table.headers)
        for row in table.rows:
            writer.writerow(["" if row.get(h) is None else row.get(h) for h in table.headers])
    logger.info("Wrote %d rows to %s", len(table.rows), output_path)


def read_table_csv(input_path: Path) -> TableResult:
    """Read a table previously written by :func:`write_table_csv`.

    Blank cells come back as ``None``.
    """
    with open(input_path, newline="", encoding="utf-8-sig") as f:
        records = list(csv.reader(f))

    if not records:
        return TableResult()

    headers = records[0]
    rows: list[Row] = []
    for record in records[1:]:
        if not any(cell.strip() for cell in record):
            continue
        rows.append(
            {
                h: (record[i] if i < len(record) and record[i] != "" else None)
                for i, h in enumerate(headers)
            }
        )
    logger.info("Read %d rows from %s", len(rows), input_path)
    return TableResult(headers=headers, rows=rows)
