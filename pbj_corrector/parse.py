"""
Input decoding and tolerant PBJ row parsing.

Responsibilities:
- encoding detection at the byte boundary (the only fatal step)
- newline normalization
- header alias resolution
- one Record per input line, never dropping a row
"""

from __future__ import annotations

import csv
import logging
import math
from typing import Any, Dict, List, Optional, Sequence, Tuple

from charset_normalizer import from_bytes

from .models import Record
from .rules import HEADER_ALIASES, NORMALIZED_DELIMITER, SALARY_TRUE_VALUES

logger = logging.getLogger(__name__)

HeaderMap = Dict[str, Tuple[int, ...]]

_UTF8_BOM = b"\xef\xbb\xbf"


class UnreadableInputError(ValueError):
    """Raised when the uploaded bytes cannot be decoded as text."""


def decode_input(raw: bytes) -> Tuple[str, Dict[str, Any]]:
    """
    Decode uploaded bytes to text with LF newlines.

    Rules:
    - A UTF-8 BOM is stripped.
    - Strict UTF-8 is tried first, then the best charset-normalizer guess.
    - If neither decodes, raise UnreadableInputError; no replacement
      characters are ever substituted into payroll data.
    - NUL characters reject only a guessed decoding; in strict UTF-8 they
      stay in the field and surface as ordinary record defects.
    """
    detected = None
    decode_used = "utf-8-sig" if raw.startswith(_UTF8_BOM) else "utf-8"

    try:
        text = raw.decode(decode_used)
    except UnicodeDecodeError:
        match = from_bytes(raw).best()
        if match is None:
            raise UnreadableInputError("input is not readable text")
        detected = match.encoding
        decode_used = detected
        try:
            text = raw.decode(decode_used)
        except (UnicodeDecodeError, LookupError) as exc:
            raise UnreadableInputError(f"input could not be decoded as {decode_used}") from exc
        # NUL in a guessed decoding means binary input, not text.
        if "\x00" in text:
            raise UnreadableInputError("input contains NUL bytes")

    # --- Newline normalization: CRLF/CR -> LF ---
    nl_before = {
        "crlf": text.count("\r\n"),
        "cr": text.count("\r") - text.count("\r\n"),
        "lf": text.count("\n") - text.count("\r\n"),
    }
    text = text.replace("\r\n", "\n").replace("\r", "\n")

    report = {
        "detected": detected,
        "decode_used": decode_used,
        "newlines": nl_before,
    }
    logger.debug("decoded %d bytes using %s", len(raw), decode_used)
    return text, report


def _split_line(line: str) -> List[str]:
    # One physical line is one row; quoted fields are honoured but never
    # continue onto the next line.
    try:
        fields = next(csv.reader([line], delimiter=NORMALIZED_DELIMITER), [])
    except csv.Error:
        fields = line.split(NORMALIZED_DELIMITER)
    return [f.strip() for f in fields]


def resolve_header(line: str) -> HeaderMap:
    """Map each logical field to the column indexes of its accepted aliases."""
    names = [name.lower() for name in _split_line(line)]
    header: HeaderMap = {}
    for field, aliases in HEADER_ALIASES.items():
        header[field] = tuple(
            idx for alias in aliases for idx, name in enumerate(names) if name == alias
        )
    return header


def _field(values: Sequence[str], indexes: Tuple[int, ...]) -> str:
    for idx in indexes:
        if idx < len(values) and values[idx]:
            return values[idx]
    return ""


def parse_hours(text: str) -> Optional[float]:
    """Empty text counts as zero hours; anything else must be a finite number."""
    if not text:
        return 0.0
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def parse_salary(text: str) -> bool:
    return text.lower() in SALARY_TRUE_VALUES


def parse_row(values: Sequence[str], header: HeaderMap, row: int) -> Record:
    hours_text = _field(values, header["hours"])
    return Record(
        row=row,
        date=_field(values, header["date"]),
        position_code=_field(values, header["position_code"]),
        hours=parse_hours(hours_text),
        hours_text=hours_text,
        is_salaried=parse_salary(_field(values, header["salary"])),
        employee_id=_field(values, header["employee_id"]),
    )


def parse_records(text: str) -> List[Record]:
    """
    Parse PBJ text into records, one per line after the header.

    Row numbers are 1-based source lines: the header is line 1, so the
    first record is row 2. Short rows get empty strings, extra fields are
    ignored, blank lines still yield a record.
    """
    lines = text.strip().split("\n")
    if not lines or not lines[0].strip():
        return []

    header = resolve_header(lines[0])
    missing = [field for field, idx in header.items() if not idx]
    if missing:
        logger.info("header has no column for: %s", ", ".join(missing))

    records = [
        parse_row(_split_line(line), header, row=i + 1)
        for i, line in enumerate(lines[1:], start=1)
    ]
    return records
