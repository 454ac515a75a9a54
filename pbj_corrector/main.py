import base64
import logging

from fastapi import FastAPI, UploadFile, File, HTTPException
from fastapi.responses import Response

from .models import ProcessResponse, HealthResponse
from .engine import process_pbj_bytes
from .parse import UnreadableInputError
from .settings import get_settings

logger = logging.getLogger(__name__)

app = FastAPI(
    title="pbj-corrector",
    description="Deterministic PBJ staffing record validation and auto-correction",
    version="0.1.0",
)


async def _process_upload(file: UploadFile) -> dict:
    settings = get_settings()
    filename = file.filename or settings.default_source
    if not filename.lower().endswith(".csv"):
        logger.warning("rejected upload %r: not a CSV file", filename)
        raise HTTPException(status_code=422, detail="Only CSV files are supported")

    raw = await file.read(settings.max_upload_bytes + 1)
    if len(raw) > settings.max_upload_bytes:
        logger.warning("rejected upload %r: %d bytes", filename, len(raw))
        raise HTTPException(status_code=413, detail="File is too large")

    try:
        return process_pbj_bytes(raw, source=filename)
    except UnreadableInputError as exc:
        logger.warning("rejected upload %r: %s", filename, exc)
        raise HTTPException(
            status_code=422,
            detail="Error processing file. Please check the format and try again.",
        ) from exc


def _download(artifact: dict) -> Response:
    return Response(
        content=base64.b64decode(artifact["content_b64"]),
        media_type=artifact["media_type"],
        headers={"Content-Disposition": f'attachment; filename="{artifact["filename"]}"'},
    )


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/pbj/process", response_model=ProcessResponse)
async def process_pbj(file: UploadFile = File(...)):
    return await _process_upload(file)


@app.post("/pbj/corrected")
async def download_corrected(file: UploadFile = File(...)):
    result = await _process_upload(file)
    return _download(result["corrected_csv"])


@app.post("/pbj/report")
async def download_report(file: UploadFile = File(...)):
    result = await _process_upload(file)
    return _download(result["issue_report"])
