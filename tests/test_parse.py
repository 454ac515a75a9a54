import pytest

from pbj_corrector.parse import (
    UnreadableInputError,
    decode_input,
    parse_hours,
    parse_records,
    resolve_header,
)


def test_header_aliases_are_case_insensitive():
    header = resolve_header("Date, Position_Code ,HOURS,Salary,Emp_ID,notes")
    assert header["date"] == (0,)
    assert header["position_code"] == (1,)
    assert header["hours"] == (2,)
    assert header["salary"] == (3,)
    assert header["employee_id"] == (4,)


def test_records_keep_source_row_numbers():
    text = "date,position,hours,salary,employee_id\n2024-01-13,13000,8,true,E1\n2024-01-14,13000,8,false,E2\n"
    records = parse_records(text)
    assert [r.row for r in records] == [2, 3]
    assert records[0].employee_id == "E1"
    assert records[0].is_salaried is True
    assert records[1].is_salaried is False


def test_short_long_and_blank_rows_are_kept():
    text = (
        "date,position,hours,salary,employee_id\n"
        "2024-01-13,13000\n"
        "\n"
        "2024-01-13,13000,8,true,E1,extra,fields\n"
    )
    records = parse_records(text)
    assert len(records) == 3

    short, blank, long_ = records
    assert short.employee_id == ""
    assert short.hours == 0.0
    assert blank.row == 3
    assert blank.date == ""
    assert long_.employee_id == "E1"


def test_position_alias_columns_fall_back():
    text = "date,position,position_code,hours,salary,emp_id\n2024-01-13,,13000,8,1,E1\n"
    (record,) = parse_records(text)
    assert record.position_code == "13000"
    assert record.employee_id == "E1"
    assert record.is_salaried is True


def test_values_are_trimmed():
    (record,) = parse_records("date,position,hours,salary,employee_id\n 2024-01-13 , RN , 7.5 , TRUE , E9 \n")
    assert record.date == "2024-01-13"
    assert record.position_code == "RN"
    assert record.hours == 7.5
    assert record.is_salaried is True
    assert record.employee_id == "E9"


@pytest.mark.parametrize("text,expected", [
    ("", 0.0),
    ("8", 8.0),
    ("-2", -2.0),
    ("abc", None),
    ("nan", None),
    ("inf", None),
])
def test_parse_hours(text, expected):
    assert parse_hours(text) == expected


def test_empty_input_has_no_records():
    assert parse_records("") == []
    assert parse_records("date,position,hours,salary,employee_id\n") == []


def test_decode_strips_bom_and_normalizes_newlines():
    raw = b"\xef\xbb\xbfdate,position\r\n2024-01-13,RN\r\n"
    text, report = decode_input(raw)
    assert text == "date,position\n2024-01-13,RN\n"
    assert report["decode_used"] == "utf-8-sig"
    assert report["newlines"]["crlf"] == 2


def test_decode_rejects_binary():
    with pytest.raises(UnreadableInputError):
        decode_input(b"\x00" * 64 + b"\xff" * 8)


def test_nul_inside_utf8_field_is_a_record_defect():
    raw = "date,position,hours,salary,employee_id\n2024-01-15,13000,8,true,E\x001\n".encode("utf-8")
    text, report = decode_input(raw)
    assert report["decode_used"] == "utf-8"

    (record,) = parse_records(text)
    assert record.row == 2
    assert record.employee_id == "E\x001"
