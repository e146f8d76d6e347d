"""Service layer for the application."""

from promo_report.services.analysis_client import AnalysisClient, AnalysisError
from promo_report.services.ocr_service import OcrError, OcrResult, OcrService
from promo_report.services.progress import Progress, ProgressStore
from promo_report.services.report_pipeline import (
    ReportPipeline,
    ReportResult,
    UnsupportedImageError,
    UploadedImage,
    UploadTooLargeError,
)

__all__ = [
    "AnalysisClient",
    "AnalysisError",
    "OcrError",
    "OcrResult",
    "OcrService",
    "Progress",
    "ProgressStore",
    "ReportPipeline",
    "ReportResult",
    "UnsupportedImageError",
    "UploadedImage",
    "UploadTooLargeError",
]
