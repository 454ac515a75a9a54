"""
Summary counts and the two downloadable artifacts.

Artifact A is the corrected dataset as CSV; artifact B is the plain-text
issue report with a SUMMARY and a DETAILED ERRORS block.
"""

from __future__ import annotations

import csv
import io
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from .models import Record, ReportItem, ValidationSummary
from .rules import CORRECTED_HEADER, NORMALIZED_DELIMITER

REPORT_TITLE = "PBJ Validation Error Report"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def summarize(records: Sequence[Record]) -> ValidationSummary:
    return ValidationSummary(
        total_records=len(records),
        valid_records=sum(1 for r in records if not r.errors),
        error_records=sum(1 for r in records if r.errors),
        warning_records=sum(1 for r in records if r.warnings),
        corrected_records=sum(1 for r in records if r.corrected),
    )


def collect_issues(records: Iterable[Record]) -> List[ReportItem]:
    """One item per diagnostic, ordered by row and then by rule."""
    items: List[ReportItem] = []
    for record in sorted(records, key=lambda r: r.row):
        for diag in record.diagnostics:
            items.append(ReportItem(
                row=record.row,
                severity=diag.severity,
                kind=diag.kind,
                message=diag.kind.message,
            ))
    return items


def format_hours(record: Record) -> str:
    if record.hours is None:
        return record.hours_text
    if record.hours.is_integer():
        return str(int(record.hours))
    return repr(record.hours)


def _writer(buf: io.StringIO):
    return csv.writer(buf, delimiter=NORMALIZED_DELIMITER, lineterminator="\n")


def render_corrected_csv(records: Sequence[Record]) -> str:
    buf = io.StringIO(newline="")
    writer = _writer(buf)
    writer.writerow(CORRECTED_HEADER)
    for record in records:
        writer.writerow([
            record.date,
            record.position_code,
            format_hours(record),
            "TRUE" if record.is_salaried else "FALSE",
            record.employee_id,
            "YES" if record.corrected else "NO",
        ])
    return buf.getvalue()


def render_issue_report(
    summary: ValidationSummary,
    issues: Sequence[ReportItem],
    source: str,
    generated_at: Optional[datetime] = None,
) -> str:
    """
    Render the plain-text issue report.

    The DETAILED ERRORS block is written with csv.writer, so a message that
    contains a comma is double-quoted and each line stays a 3-field row.
    """
    generated_at = generated_at or datetime.now()

    buf = io.StringIO(newline="")
    lines = [
        REPORT_TITLE,
        f"Generated: {generated_at.strftime(TIMESTAMP_FORMAT)}",
        f"File: {source}",
        "",
        "SUMMARY",
        f"Total Records: {summary.total_records}",
        f"Valid Records: {summary.valid_records}",
        f"Records with Errors: {summary.error_records}",
        f"Records with Warnings: {summary.warning_records}",
        "",
        "DETAILED ERRORS",
    ]
    buf.write("\n".join(lines) + "\n")

    writer = _writer(buf)
    writer.writerow(["Row", "Severity", "Message"])
    for item in issues:
        writer.writerow([item.row, item.severity.value.upper(), item.message])
    return buf.getvalue()


def corrected_filename(source: str) -> str:
    return f"corrected_{source}"


def report_filename(generated_at: datetime) -> str:
    return f"pbj_error_report_{generated_at.strftime('%Y-%m-%d')}.txt"
