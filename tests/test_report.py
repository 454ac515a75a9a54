from datetime import datetime

from pbj_corrector.engine import process_pbj_bytes, process_text
from pbj_corrector.models import IssueKind, Record, Severity
from pbj_corrector.report import (
    collect_issues,
    format_hours,
    render_corrected_csv,
    render_issue_report,
    report_filename,
    summarize,
)
from pbj_corrector.validate import validate_records

HEADER = "date,position,hours,salary,employee_id\n"
GENERATED = datetime(2024, 1, 20, 9, 30, 0)


def test_end_to_end_example():
    result = process_text(HEADER + "01/15/2024,RN,30,true,E1\n")
    (record,) = result.corrected

    assert record.errors == []
    assert record.warnings == [IssueKind.HOURS_EXCESSIVE]
    assert render_corrected_csv(result.corrected).splitlines()[1] == "2024-01-15,13000,24,TRUE,E1,YES"

    # the validated record still shows what was wrong with the input
    assert result.validated[0].errors == [
        IssueKind.DATE_FORMAT,
        IssueKind.POSITION_CODE,
        IssueKind.HOURS_RANGE,
    ]


def test_summary_counts_corrected_records():
    text = HEADER + (
        "2024-01-15,13000,8,false,E1\n"
        "2024-01-15,13000,8,false,E1\n"
        "2024-01-16,RN,18,false,E2\n"
        "2024-01-16,Nurse,8,false,\n"
    )
    summary = process_text(text).summary
    assert summary.total_records == 4
    assert summary.valid_records == 1
    assert summary.error_records == 3
    assert summary.warning_records == 1
    assert summary.corrected_records == 1


def test_issues_are_ordered_by_row_then_rule():
    records = [
        Record(row=3, date="bad", position_code="13000", hours=8.0, employee_id="E2"),
        Record(row=2, date="2024-01-15", position_code="XX", hours=20.0, employee_id=""),
    ]
    issues = collect_issues(validate_records(records))
    assert [(i.row, i.kind) for i in issues] == [
        (2, IssueKind.POSITION_CODE),
        (2, IssueKind.HOURS_EXCESSIVE),
        (2, IssueKind.MISSING_EMPLOYEE_ID),
        (3, IssueKind.DATE_FORMAT),
    ]
    assert issues[1].severity is Severity.WARNING


def test_hours_formatting():
    assert format_hours(Record(row=2, hours=8.0)) == "8"
    assert format_hours(Record(row=2, hours=7.5)) == "7.5"
    assert format_hours(Record(row=2, hours=None, hours_text="abc")) == "abc"


def test_unparsed_hours_survive_in_corrected_csv():
    result = process_text(HEADER + "2024-01-15,13000,abc,0,E1\n")
    assert render_corrected_csv(result.corrected).splitlines()[1] == "2024-01-15,13000,abc,FALSE,E1,NO"


def test_issue_report_layout():
    result = process_text(HEADER + "2024-01-15,13000,8,false,E1\n2024-01-15,13000,8,false,E1\n")
    text = render_issue_report(result.summary, result.issues, "staff.csv", GENERATED)

    assert text.splitlines() == [
        "PBJ Validation Error Report",
        "Generated: 2024-01-20 09:30:00",
        "File: staff.csv",
        "",
        "SUMMARY",
        "Total Records: 2",
        "Valid Records: 0",
        "Records with Errors: 2",
        "Records with Warnings: 0",
        "",
        "DETAILED ERRORS",
        "Row,Severity,Message",
        '2,ERROR,"Duplicate entry found for same employee, position, and date"',
        '3,ERROR,"Duplicate entry found for same employee, position, and date"',
    ]


def test_every_input_row_is_reported():
    text = HEADER + "\n".join(["garbage", "", "a,b,c,d,e,f,g"]) + "\n"
    result = process_text(text)
    assert [r.row for r in result.corrected] == [2, 3, 4]
    assert summarize(result.corrected).error_records == 3


def test_process_bytes_envelope():
    raw = (HEADER + "01/15/2024,RN,30,true,E1\n").encode("utf-8")
    out = process_pbj_bytes(raw, source="staff.csv", generated_at=GENERATED)

    assert out["corrected_csv"]["filename"] == "corrected_staff.csv"
    assert out["corrected_csv"]["media_type"] == "text/csv"
    assert out["issue_report"]["filename"] == report_filename(GENERATED)
    assert out["issue_report"]["filename"] == "pbj_error_report_2024-01-20.txt"
    assert len(out["corrected_csv"]["sha256"]) == 64
    assert out["report"]["summary"]["valid_records"] == 1
    assert out["report"]["decoding"]["decode_used"] == "utf-8"


def test_nul_in_one_field_does_not_reject_the_file():
    raw = (HEADER + "2024-01-15,13000,8,true,E\x001\n2024-01-16,14000,8,false,E2\n").encode("utf-8")
    out = process_pbj_bytes(raw, source="staff.csv", generated_at=GENERATED)
    assert out["report"]["summary"]["total_records"] == 2
