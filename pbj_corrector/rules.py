"""
Deterministic PBJ validation and correction rules.

Reference tables are read-only mappings; nothing here changes at runtime.
"""

from __future__ import annotations

import re
from types import MappingProxyType

TARGET_ENCODING = "utf-8"
NORMALIZED_DELIMITER = ","

# CMS position codes
POSITION_CODES = MappingProxyType({
    "11000": "Administrator",
    "11100": "Assistant Administrator",
    "12000": "RN Director of Nursing",
    "12100": "RN Assistant Director of Nursing",
    "13000": "RN Staff",
    "14000": "LPN/LVN Staff",
    "21000": "CNA Staff",
    "22000": "Medication Aide/Technician",
    "31000": "Physical Therapist",
    "31100": "Physical Therapy Assistant",
    "32000": "Occupational Therapist",
    "32100": "Occupational Therapy Assistant",
    "33000": "Speech Language Pathologist",
    "34000": "Respiratory Therapist",
    "41000": "Social Worker",
    "51000": "Activities Staff",
    "61000": "Dietary Staff",
    "71000": "Housekeeping/Laundry Staff",
    "81000": "Maintenance Staff",
})

# Shorthand labels seen in payroll exports; exact, case-sensitive keys.
POSITION_ALIASES = MappingProxyType({
    "RN": "13000",
    "LPN": "14000",
    "CNA": "21000",
    "DON": "12000",
    "ADON": "12100",
    "PT": "31000",
    "OT": "32000",
    "Social Work": "41000",
    "Activities": "51000",
    "Dietary": "61000",
    "Housekeeping": "71000",
    "Maintenance": "81000",
})

RN_POSITION_CODES = frozenset({"12000", "12100", "13000"})

MIN_HOURS = 0.0
MAX_HOURS = 24.0
EXCESSIVE_HOURS = 16.0
WEEKEND_RN_MIN_HOURS = 8.0

# Saturday, Sunday (date.weekday())
WEEKEND_DAYS = frozenset({5, 6})

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Tried in order; groups are (month, day, year) or (year, month, day).
ALTERNATE_DATE_FORMATS = (
    (re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$"), ("month", "day", "year")),
    (re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$"), ("month", "day", "year")),
    (re.compile(r"^(\d{4})(\d{2})(\d{2})$"), ("year", "month", "day")),
)

# Logical field -> accepted header names, in lookup order (lower-case).
HEADER_ALIASES = MappingProxyType({
    "date": ("date",),
    "position_code": ("position", "position_code"),
    "hours": ("hours",),
    "salary": ("salary",),
    "employee_id": ("employee_id", "emp_id"),
})

SALARY_TRUE_VALUES = frozenset({"true", "1"})

CORRECTED_HEADER = ("Date", "Position_Code", "Hours", "Salary", "Employee_ID", "Corrected")

ISSUE_MESSAGES = MappingProxyType({
    "DATE_FORMAT": "Invalid date format. Must be YYYY-MM-DD",
    "POSITION_CODE": "Invalid position code. Must be valid CMS position code",
    "HOURS_RANGE": "Invalid hours. Must be between 0 and 24",
    "MISSING_EMPLOYEE_ID": "Employee ID is required",
    "DUPLICATE_ENTRY": "Duplicate entry found for same employee, position, and date",
    "HOURS_EXCESSIVE": "Hours exceed 16 per day - verify accuracy",
    "WEEKEND_RN_COVERAGE": "RN coverage required on weekends - verify staffing",
})
