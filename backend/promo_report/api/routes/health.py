"""Health check endpoints."""

from fastapi import APIRouter, Depends

from promo_report.core.config import Settings, get_settings
from promo_report.schemas.report import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse, tags=["system"])
def healthcheck(settings: Settings = Depends(get_settings)) -> HealthResponse:
    """Simple readiness probe."""

    return HealthResponse(status="ok", model=settings.analysis_model, llm=settings.llm_base_url)
