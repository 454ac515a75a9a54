from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .rules import ISSUE_MESSAGES


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class IssueKind(str, Enum):
    DATE_FORMAT = "DATE_FORMAT"
    POSITION_CODE = "POSITION_CODE"
    HOURS_RANGE = "HOURS_RANGE"
    MISSING_EMPLOYEE_ID = "MISSING_EMPLOYEE_ID"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"
    HOURS_EXCESSIVE = "HOURS_EXCESSIVE"
    WEEKEND_RN_COVERAGE = "WEEKEND_RN_COVERAGE"

    @property
    def message(self) -> str:
        return ISSUE_MESSAGES[self.value]


class Diagnostic(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: IssueKind
    severity: Severity

    @classmethod
    def error(cls, kind: IssueKind) -> "Diagnostic":
        return cls(kind=kind, severity=Severity.ERROR)

    @classmethod
    def warning(cls, kind: IssueKind) -> "Diagnostic":
        return cls(kind=kind, severity=Severity.WARNING)


class Record(BaseModel):
    """
    One staffing line from the submitted file.

    Records are value objects: validation and correction return new
    instances via ``model_copy`` rather than mutating in place.
    ``diagnostics`` is kept in rule order; ``errors`` and ``warnings``
    are views over it.
    """

    model_config = ConfigDict(frozen=True)

    row: int
    date: str = ""
    position_code: str = ""
    hours: Optional[float] = 0.0
    hours_text: str = ""
    is_salaried: bool = False
    employee_id: str = ""
    diagnostics: Tuple[Diagnostic, ...] = ()
    corrected: bool = False

    @property
    def errors(self) -> List[IssueKind]:
        return [d.kind for d in self.diagnostics if d.severity is Severity.ERROR]

    @property
    def warnings(self) -> List[IssueKind]:
        return [d.kind for d in self.diagnostics if d.severity is Severity.WARNING]


class ValidationSummary(BaseModel):
    total_records: int = 0
    valid_records: int = 0
    error_records: int = 0
    warning_records: int = 0
    corrected_records: int = 0


class ReportItem(BaseModel):
    row: int
    severity: Severity
    kind: IssueKind
    message: str


class Artifact(BaseModel):
    filename: str
    media_type: str
    sha256: str
    encoding: str = Field(default="utf-8")
    content_b64: str


class ProcessingReport(BaseModel):
    summary: ValidationSummary
    decoding: Dict[str, Any] = Field(default_factory=dict)
    issues: List[ReportItem] = Field(default_factory=list)


class ProcessResponse(BaseModel):
    corrected_csv: Artifact
    issue_report: Artifact
    report: ProcessingReport


class HealthResponse(BaseModel):
    ok: bool = True
