"""
Deterministic per-record auto-correction.

correct_record never raises and never looks at other records. Fields it
cannot repair are left as they were, with their original errors kept.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from .models import IssueKind, Record
from .rules import ALTERNATE_DATE_FORMATS, MAX_HOURS, POSITION_ALIASES
from .validate import hours_in_range, is_iso_date, is_known_position


def normalize_date(value: str) -> Optional[str]:
    """
    Return ``value`` rewritten as YYYY-MM-DD, or None if no known format matches.

    Dates already in YYYY-MM-DD come back unchanged.
    """
    if is_iso_date(value):
        return value
    for pattern, order in ALTERNATE_DATE_FORMATS:
        match = pattern.match(value)
        if match:
            parts = dict(zip(order, match.groups()))
            return f"{parts['year']}-{parts['month'].zfill(2)}-{parts['day'].zfill(2)}"
    return None


def correct_position(value: str) -> Optional[str]:
    return POSITION_ALIASES.get(value)


def _resolved(kind: IssueKind, record: Record) -> bool:
    if kind is IssueKind.DATE_FORMAT:
        return is_iso_date(record.date)
    if kind is IssueKind.POSITION_CODE:
        return is_known_position(record.position_code)
    if kind is IssueKind.HOURS_RANGE:
        return hours_in_range(record.hours)
    return False


def correct_record(record: Record) -> Record:
    changes = {}

    if record.date:
        date = normalize_date(record.date)
        if date is not None and date != record.date:
            changes["date"] = date

    position = correct_position(record.position_code)
    if position is not None:
        changes["position_code"] = position

    if record.hours is not None and record.hours > MAX_HOURS:
        changes["hours"] = MAX_HOURS

    fixed = record.model_copy(update=changes)
    diagnostics = tuple(d for d in record.diagnostics if not _resolved(d.kind, fixed))
    return fixed.model_copy(update={
        "diagnostics": diagnostics,
        "corrected": record.corrected or bool(changes),
    })


def correct_records(records: Sequence[Record]) -> List[Record]:
    return [correct_record(record) for record in records]
