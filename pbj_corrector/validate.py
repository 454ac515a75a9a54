"""
Two-pass PBJ validation.

Pass 1 (validate_record) looks at one record at a time and can run over
records in any order. Pass 2 (validate_dataset) needs the whole set and
must run after pass 1 has finished for every record.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Dict, List, Optional, Sequence, Tuple

from .models import Diagnostic, IssueKind, Record
from .rules import (
    EXCESSIVE_HOURS,
    ISO_DATE_RE,
    MAX_HOURS,
    MIN_HOURS,
    POSITION_CODES,
    RN_POSITION_CODES,
    WEEKEND_DAYS,
    WEEKEND_RN_MIN_HOURS,
)

logger = logging.getLogger(__name__)

CROSS_RECORD_KINDS = frozenset({IssueKind.DUPLICATE_ENTRY, IssueKind.WEEKEND_RN_COVERAGE})


def is_iso_date(value: str) -> bool:
    return bool(ISO_DATE_RE.match(value))


def is_known_position(value: str) -> bool:
    return value in POSITION_CODES


def hours_in_range(hours: Optional[float]) -> bool:
    return hours is not None and MIN_HOURS <= hours <= MAX_HOURS


def validate_record(record: Record) -> Record:
    """Pass 1: per-record rules. Replaces any diagnostics the record carried."""
    diagnostics: List[Diagnostic] = []

    if not is_iso_date(record.date):
        diagnostics.append(Diagnostic.error(IssueKind.DATE_FORMAT))

    if not is_known_position(record.position_code):
        diagnostics.append(Diagnostic.error(IssueKind.POSITION_CODE))

    if not hours_in_range(record.hours):
        diagnostics.append(Diagnostic.error(IssueKind.HOURS_RANGE))
    if record.hours is not None and record.hours > EXCESSIVE_HOURS:
        diagnostics.append(Diagnostic.warning(IssueKind.HOURS_EXCESSIVE))

    if not record.employee_id.strip():
        diagnostics.append(Diagnostic.error(IssueKind.MISSING_EMPLOYEE_ID))

    return record.model_copy(update={"diagnostics": tuple(diagnostics)})


def _weekend_date(value: str) -> Optional[date]:
    if not is_iso_date(value):
        return None
    try:
        parsed = datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return None
    return parsed if parsed.weekday() in WEEKEND_DAYS else None


def _duplicate_indexes(records: Sequence[Record]) -> set:
    groups: Dict[Tuple[str, str, str], List[int]] = defaultdict(list)
    for idx, record in enumerate(records):
        groups[(record.date, record.position_code, record.employee_id)].append(idx)
    return {idx for members in groups.values() if len(members) > 1 for idx in members}


def _short_weekend_dates(records: Sequence[Record]) -> set:
    rn_hours: Dict[str, float] = defaultdict(float)
    for record in records:
        if record.position_code not in RN_POSITION_CODES:
            continue
        if _weekend_date(record.date) is None:
            continue
        # Only positive hours count toward coverage.
        rn_hours[record.date] += record.hours if record.hours and record.hours > 0 else 0.0
    return {day for day, total in rn_hours.items() if total < WEEKEND_RN_MIN_HOURS}


def validate_dataset(records: Sequence[Record]) -> List[Record]:
    """
    Pass 2: cross-record rules over the full set.

    Cross-record diagnostics from an earlier run are dropped first, so
    running this again on its own output gives the same result.
    """
    base = [
        record.model_copy(update={
            "diagnostics": tuple(d for d in record.diagnostics if d.kind not in CROSS_RECORD_KINDS),
        })
        for record in records
    ]

    duplicates = _duplicate_indexes(base)
    short_dates = _short_weekend_dates(base)

    result: List[Record] = []
    for idx, record in enumerate(base):
        extra: List[Diagnostic] = []
        if idx in duplicates:
            extra.append(Diagnostic.error(IssueKind.DUPLICATE_ENTRY))
        if record.position_code in RN_POSITION_CODES and record.date in short_dates:
            extra.append(Diagnostic.warning(IssueKind.WEEKEND_RN_COVERAGE))
        if extra:
            record = record.model_copy(update={"diagnostics": record.diagnostics + tuple(extra)})
        result.append(record)

    logger.debug(
        "cross-record pass: %d duplicates, %d short weekend dates",
        len(duplicates), len(short_dates),
    )
    return result


def validate_records(records: Sequence[Record]) -> List[Record]:
    """Run pass 1 over every record, then pass 2 over the set."""
    return validate_dataset([validate_record(record) for record in records])
