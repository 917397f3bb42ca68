"""Header synonyms and token parsers behind task derivation.

A :class:`ColumnMapping` says which table headers can stand for each
semantic field (``name``, ``start``, ``end``, ``quantity``, ``workers``).
Synonyms are listed in priority order, so the first one present in a row
wins.
"""

import re
from datetime import date, datetime

from ocr_gantt.utils.logger import get_logger

logger = get_logger(__name__)

SEMANTIC_FIELDS = ("name", "start", "end", "quantity", "workers")

DATE_TOKEN = re.compile(
    r"(?<!\d)\d{4}\s*(?:[/\-.]|年)\s*\d{1,2}\s*(?:[/\-.]|月)\s*\d{1,2}(?:\s*日)?(?!\d)"
)
_NUMBER = re.compile(r"[-+]?\d+(?:\.\d+)?")


class ColumnMapping:
    """Resolves semantic fields to the headers of a particular table.

    Args:
        columns: Semantic field name to header synonyms, highest priority
            first. Unknown field names are kept but never looked up.
    """

    def __init__(self, columns: dict[str, list[str]]) -> None:
        self.columns = {name: list(synonyms) for name, synonyms in columns.items()}

    def synonyms(self, field_name: str) -> list[str]:
        return self.columns.get(field_name, [])

    def find_key(self, row: dict, field_name: str) -> str | None:
        """Return the highest-priority synonym present in ``row`` as a key."""
        for synonym in self.synonyms(field_name):
            if synonym in row:
                return synonym
        return None

    def lookup(self, row: dict, field_name: str) -> str | None:
        """Return the first non-blank value among the field's synonyms."""
        for synonym in self.synonyms(field_name):
            value = row.get(synonym)
            if value is not None and str(value).strip():
                return str(value).strip()
        return None

    def resolve(self, headers: list[str]) -> dict[str, str | None]:
        """Report which header each semantic field maps to for a header list."""
        header_set = dict.fromkeys(headers)
        return {name: self.find_key(header_set, name) for name in SEMANTIC_FIELDS}


def find_date_token(value: object) -> str | None:
    """Return the first date-like token inside a cell value, if any."""
    if value is None:
        return None
    match = DATE_TOKEN.search(str(value))
    return match.group(0) if match else None


def parse_date(token: str, formats: list[str]) -> date | None:
    """Parse a date token against each format in turn.

    Whitespace inside the token is dropped first, since OCR tends to insert
    spaces around separators.
    """
    compact = re.sub(r"\s+", "", token)
    for fmt in formats:
        try:
            return datetime.strptime(compact, fmt).date()
        except ValueError:
            continue
    logger.debug("Unparseable date token %r", token)
    return None


def parse_quantity(value: object) -> float | None:
    """Read a number out of a cell such as ``"1,200個"``."""
    if value is None:
        return None
    match = _NUMBER.search(str(value).replace(",", "").replace("，", ""))
    return float(match.group(0)) if match else None


def parse_workers(value: object, suffixes: list[str]) -> float | None:
    """Read a worker count such as ``"3人"`` by stripping a unit suffix."""
    if value is None:
        return None
    text = str(value).strip()
    for suffix in suffixes:
        if suffix and text.endswith(suffix):
            text = text[: -len(suffix)].strip()
            break
    try:
        return float(text)
    except ValueError:
        return parse_quantity(text)
