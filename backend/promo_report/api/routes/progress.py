"""OCR progress polling endpoint."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from promo_report.api.deps import get_progress_store
from promo_report.schemas.report import ProgressResponse
from promo_report.services.progress import ProgressStore

router = APIRouter(tags=["progress"])


@router.get("/ocr-progress", response_model=ProgressResponse)
def ocr_progress(
    session_id: Optional[str] = Query(default=None, alias="sessionId"),
    store: ProgressStore = Depends(get_progress_store),
) -> ProgressResponse:
    """Report how many images of a session have been through OCR."""

    if not session_id:
        raise HTTPException(status_code=400, detail="Session ID is required")
    progress = store.get(session_id)
    return ProgressResponse(
        session_id=session_id,
        progress=progress.percent,
        completed=progress.completed,
        total=progress.total,
    )
