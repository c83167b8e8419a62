"""
CSV schema detection and record building.

Decides whether the first CSV line is a header or already data, derives
column names, and turns every data line into a column -> value record.
Parsing is a naive comma split: quoted fields and custom delimiters are
not supported.

The header/data decision is a heuristic. A line counts as data when at
least DATA_LINE_THRESHOLD of its values look like e-mails, ISO dates,
upper-case identifiers or numbers.

Dependencies: re, math
System role: Parsing stage of the import worker
"""

import math
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Sequence

DATA_LINE_THRESHOLD = 0.3

MULTIPART_HEADER_PREFIXES = ("Content-Disposition:", "Content-Type:")
BOUNDARY_PREFIX = "--"

_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")
_IDENTIFIER_PATTERN = re.compile(r"^[A-Z0-9]{8,}$")


@dataclass
class ParsedRecord:
    """One parsed CSV row ready for persistence."""

    job_id: uuid.UUID
    file_name: str
    payload: dict[str, str]
    imported_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: uuid.UUID = field(default_factory=uuid.uuid4)


def split_values(line: str) -> list[str]:
    """Split a CSV line on commas and trim every value."""
    return [value.strip() for value in line.split(",")]


def _is_number(value: str) -> bool:
    # float() also takes "1_000", "inf" and "nan"; none of those are data.
    if "_" in value:
        return False
    try:
        number = float(value)
    except ValueError:
        return False
    return math.isfinite(number)


def data_score(values: Sequence[str]) -> int:
    """
    Count data indicators across values.

    Each value can contribute more than one point (e.g. an identifier made
    of digits is both an identifier and a number).
    """
    score = 0
    for value in values:
        if "@" in value and "." in value:
            score += 1
        if _DATE_PATTERN.search(value):
            score += 1
        if _IDENTIFIER_PATTERN.match(value):
            score += 1
        if _is_number(value):
            score += 1
    return score


def is_data_line(values: Sequence[str], threshold: float = DATA_LINE_THRESHOLD) -> bool:
    """
    Decide whether a split first line is data rather than a header.

    Args:
        values: Trimmed comma-separated values of the line
        threshold: Fraction of the value count the score must reach

    Returns:
        bool: True when the line looks like data
    """
    if not values:
        return False
    return data_score(values) >= len(values) * threshold


def find_first_content_index(lines: Sequence[str]) -> int | None:
    """Index of the first line that is neither blank nor a leftover multipart header."""
    for index, line in enumerate(lines):
        if not line.strip() or line.startswith(MULTIPART_HEADER_PREFIXES):
            continue
        return index
    return None


def detect_columns(first_line: str) -> tuple[list[str], bool]:
    """
    Build column names from the first real line.

    Returns:
        tuple[list[str], bool]: (column names, header_present)
    """
    values = split_values(first_line)
    if is_data_line(values):
        return [f"Column{i}" for i in range(1, len(values) + 1)], False
    return values, True


def build_payload(columns: Sequence[str], line: str) -> dict[str, str]:
    """Zip a line's values onto the columns; extras are dropped, missing columns absent."""
    return dict(zip(columns, split_values(line)))


def parse_csv_lines(
    job_id: uuid.UUID,
    file_name: str,
    lines: Sequence[str],
) -> list[ParsedRecord]:
    """
    Parse CSV lines into records.

    Args:
        job_id: Owning import job
        file_name: Stored file name recorded on each record
        lines: File content split into lines

    Returns:
        list[ParsedRecord]: One record per data line, in input order
    """
    start = find_first_content_index(lines)
    if start is None:
        return []

    columns, header_present = detect_columns(lines[start])
    data_start = start + 1 if header_present else start

    records: list[ParsedRecord] = []
    for line in lines[data_start:]:
        if not line.strip() or line.startswith(BOUNDARY_PREFIX):
            continue
        records.append(
            ParsedRecord(
                job_id=job_id,
                file_name=file_name,
                payload=build_payload(columns, line),
            )
        )
    return records


def parse_csv_bytes(job_id: uuid.UUID, file_name: str, content: bytes) -> list[ParsedRecord]:
    """Decode file bytes as UTF-8 (BOM tolerated) and parse them."""
    text = content.decode("utf-8-sig", errors="replace")
    return parse_csv_lines(job_id, file_name, text.splitlines())
