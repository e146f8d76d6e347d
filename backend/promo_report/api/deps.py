"""Common dependency functions for API routes."""

from functools import lru_cache

from fastapi import Depends

from promo_report.core.config import Settings, get_settings
from promo_report.services.analysis_client import AnalysisClient
from promo_report.services.ocr_service import OcrService
from promo_report.services.progress import ProgressStore
from promo_report.services.report_pipeline import ReportPipeline


@lru_cache
def get_progress_store() -> ProgressStore:
    return ProgressStore(ttl_seconds=get_settings().progress_ttl_seconds)


def get_ocr_service(
    settings: Settings = Depends(get_settings),
    progress: ProgressStore = Depends(get_progress_store),
) -> OcrService:
    return OcrService(
        language=settings.ocr_language,
        engine_mode=settings.ocr_engine_mode,
        page_segmentation_mode=settings.ocr_page_segmentation_mode,
        char_whitelist=settings.ocr_char_whitelist or None,
        progress=progress,
    )


def get_analysis_client(settings: Settings = Depends(get_settings)) -> AnalysisClient:
    return AnalysisClient(
        settings.llm_base_url,
        api_key=settings.llm_api_key,
        model=settings.analysis_model,
        max_tokens=settings.llm_max_tokens,
        timeout=settings.llm_timeout,
    )


def get_report_pipeline(
    settings: Settings = Depends(get_settings),
    ocr: OcrService = Depends(get_ocr_service),
    client: AnalysisClient = Depends(get_analysis_client),
) -> ReportPipeline:
    return ReportPipeline(settings, ocr, client)
