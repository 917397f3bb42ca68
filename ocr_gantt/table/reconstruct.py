"""Rebuild a header-keyed table from recognized text.

The first non-blank line supplies the column headers; every following line
is split on whitespace runs and zipped positionally against them. Values
that contain internal whitespace shift later columns, since OCR output gives
no other column boundary to work with.
"""

import re
from dataclasses import dataclass, field

from ocr_gantt.utils.logger import get_logger

logger = get_logger(__name__)

Row = dict[str, str | None]

# \s covers the ideographic space (U+3000) Tesseract emits for Japanese text
_WHITESPACE = re.compile(r"\s+")


@dataclass
class TableResult:
    """Column headers and the rows zipped against them."""

    headers: list[str] = field(default_factory=list)
    rows: list[Row] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.rows


def split_fields(line: str) -> list[str]:
    """Split a line into tokens on runs of whitespace."""
    return [token for token in _WHITESPACE.split(line.strip()) if token]


def zip_row(headers: list[str], values: list[str]) -> Row:
    """Map values onto headers by position.

    Headers without a value get ``None``; values beyond the last header are
    dropped. A repeated header keeps the value of its last column.
    """
    row: Row = {}
    for i, header in enumerate(headers):
        row[header] = values[i] if i < len(values) else None
    return row


def text_to_table(text: str) -> TableResult:
    """Reconstruct a table from recognized text.

    Args:
        text: Raw recognition output.

    Returns:
        TableResult; empty when fewer than two non-blank lines survive.
    """
    lines = [line for line in text.splitlines() if line.strip()]
    if len(lines) <= 1:
        logger.info("Recognized text has %d usable line(s); table is empty", len(lines))
        return TableResult()

    headers = split_fields(lines[0])
    rows = [zip_row(headers, split_fields(line)) for line in lines[1:]]

    short = sum(1 for row in rows if None in row.values())
    logger.info(
        "Reconstructed %d rows x %d columns (%d short rows)",
        len(rows),
        len(headers),
        short,
    )
    return TableResult(headers=headers, rows=rows)
