"""
PBJ pipeline: text -> records -> validation -> correction -> report.

Each run is a pure function of its input; nothing is kept between calls.
"""

from __future__ import annotations

import base64
import hashlib
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from .correct import correct_records
from .models import Record, ReportItem, ValidationSummary
from .parse import decode_input, parse_records
from .report import (
    collect_issues,
    corrected_filename,
    render_corrected_csv,
    render_issue_report,
    report_filename,
    summarize,
)
from .rules import TARGET_ENCODING
from .validate import validate_records

logger = logging.getLogger(__name__)


class PBJResult(BaseModel):
    source: str
    validated: List[Record]
    corrected: List[Record]
    summary: ValidationSummary
    issues: List[ReportItem]


def _sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def process_text(text: str, source: str = "pbj_data.csv") -> PBJResult:
    records = parse_records(text)
    validated = validate_records(records)
    corrected = correct_records(validated)
    summary = summarize(corrected)

    logger.info(
        "processed %s: %d records, %d valid, %d with errors, %d with warnings, %d corrected",
        source,
        summary.total_records,
        summary.valid_records,
        summary.error_records,
        summary.warning_records,
        summary.corrected_records,
    )
    return PBJResult(
        source=source,
        validated=validated,
        corrected=corrected,
        summary=summary,
        issues=collect_issues(corrected),
    )


def _artifact(filename: str, media_type: str, content: str) -> Dict[str, Any]:
    data = content.encode(TARGET_ENCODING)
    return {
        "filename": filename,
        "media_type": media_type,
        "sha256": _sha256_hex(data),
        "encoding": TARGET_ENCODING,
        "content_b64": base64.b64encode(data).decode("ascii"),
    }


def render_artifacts(result: PBJResult, generated_at: datetime) -> Dict[str, str]:
    return {
        "corrected_csv": render_corrected_csv(result.corrected),
        "issue_report": render_issue_report(
            result.summary, result.issues, result.source, generated_at
        ),
    }


def process_pbj_bytes(
    raw: bytes,
    source: str = "pbj_data.csv",
    generated_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Decode, process and render both artifacts.

    Returns a dict matching the API's response envelope. Raises
    UnreadableInputError only when the bytes are not text.
    """
    generated_at = generated_at or datetime.now()
    text, decoding = decode_input(raw)
    result = process_text(text, source)
    artifacts = render_artifacts(result, generated_at)

    return {
        "corrected_csv": _artifact(
            corrected_filename(source), "text/csv", artifacts["corrected_csv"]
        ),
        "issue_report": _artifact(
            report_filename(generated_at), "text/plain", artifacts["issue_report"]
        ),
        "report": {
            "summary": result.summary.model_dump(),
            "decoding": decoding,
            "issues": [item.model_dump(mode="json") for item in result.issues],
        },
    }
