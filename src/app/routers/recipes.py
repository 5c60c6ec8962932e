# src/app/routers/recipes.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from pydantic import ValidationError

from src.app.deps import get_import_service
from src.app.domain.errors import FileParseError, RemoteStoreError, WebsiteResolutionError
from src.app.schemas.recipes import ImportSummaryOut, WebsiteIn
from src.app.services.csv_import import CsvImportService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recipes", tags=["recipes"])

ALLOWED_CONTENT_TYPES = {"text/csv", "application/vnd.ms-excel", "application/octet-stream"}

# 10MB
MAX_CSV_BYTES = 10 * 1024 * 1024


def _is_csv(upload: UploadFile) -> bool:
    filename = (upload.filename or "").lower()
    return filename.endswith(".csv") or (upload.content_type or "") in ALLOWED_CONTENT_TYPES


@router.post("/upload-csv", response_model=ImportSummaryOut)
async def upload_csv(
    csv_file: UploadFile = File(...),
    website: str = Form(...),
    service: CsvImportService = Depends(get_import_service),
) -> ImportSummaryOut:
    try:
        site = WebsiteIn.model_validate_json(website)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid website: {exc.errors()[0]['msg']}") from exc

    if not _is_csv(csv_file):
        raise HTTPException(status_code=400, detail="Only CSV files are allowed")

    content = await csv_file.read()
    if len(content) > MAX_CSV_BYTES:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="CSV file is too large")

    filename = csv_file.filename or "upload.csv"
    context = site.to_context()
    logger.info("upload.received file=%s website=%s bytes=%d", filename, context.domain, len(content))

    try:
        summary = await service.import_csv(content, context, filename=filename)
    except FileParseError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except WebsiteResolutionError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except RemoteStoreError as exc:
        logger.error("upload.notion_unavailable website=%s error=%s", context.domain, exc)
        raise HTTPException(status_code=502, detail=f"Notion connection failed: {exc.reason}") from exc

    return ImportSummaryOut.from_summary(summary)
