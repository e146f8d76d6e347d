"""Endpoints that generate and deliver competitor analysis reports."""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import Response

from promo_report.api.deps import get_report_pipeline
from promo_report.core.config import Settings, get_settings
from promo_report.schemas.report import ReportResponse
from promo_report.services.analysis_client import AnalysisError
from promo_report.services.ocr_service import OcrError
from promo_report.services.report_pipeline import (
    ReportPipeline,
    UnsupportedImageError,
    UploadedImage,
    UploadTooLargeError,
    new_session_id,
    validate_session_id,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])

_CHUNK_SIZE = 1024 * 1024


async def read_uploads(files: List[UploadFile], limit: int) -> List[UploadedImage]:
    """Read ``files`` chunk by chunk, stopping once ``limit`` bytes are exceeded."""

    uploads: List[UploadedImage] = []
    total = 0
    for upload in files:
        chunks: List[bytes] = []
        while chunk := await upload.read(_CHUNK_SIZE):
            total += len(chunk)
            if total > limit:
                raise UploadTooLargeError(f"Upload exceeds the limit of {limit} bytes")
            chunks.append(chunk)
        uploads.append(
            UploadedImage(
                filename=upload.filename or "image",
                content=b"".join(chunks),
                content_type=upload.content_type,
            )
        )
    return uploads


@router.post("", response_model=ReportResponse)
async def create_report(
    files: List[UploadFile] = File(...),
    session_id: Optional[str] = Form(default=None),
    pipeline: ReportPipeline = Depends(get_report_pipeline),
    settings: Settings = Depends(get_settings),
) -> ReportResponse:
    """Run OCR and analysis over the uploaded images and build the report."""

    try:
        session = validate_session_id(session_id) if session_id else new_session_id()
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    try:
        uploads = await read_uploads(files, settings.max_upload_bytes)
        result = await pipeline.run(session, uploads)
    except UnsupportedImageError as exc:
        raise HTTPException(status_code=415, detail=str(exc)) from exc
    except UploadTooLargeError as exc:
        raise HTTPException(status_code=413, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except OcrError as exc:
        logger.error("OCR failed for session %s: %s", session, exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    except AnalysisError as exc:
        raise HTTPException(status_code=502, detail=f"Failed to generate analysis: {exc}") from exc

    return ReportResponse(
        success=True,
        session_id=result.session_id,
        image_count=result.image_count,
        analysis=result.analysis,
        download_url=f"/api/reports/{result.session_id}/download",
    )


@router.get("/{session_id}/download")
def download_report(
    session_id: str,
    pipeline: ReportPipeline = Depends(get_report_pipeline),
) -> Response:
    """Return the report of ``session_id`` packed into a zip archive."""

    try:
        payload = pipeline.package(session_id)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except FileNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Document not found") from exc

    return Response(
        content=payload,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="Competitor_Analysis_{session_id}.zip"'},
    )
