"""Session level orchestration: uploads, OCR, analysis, report and archive."""

from __future__ import annotations

import json
import logging
import re
import uuid
import zipfile
from dataclasses import dataclass
from datetime import datetime, timezone
from io import BytesIO
from pathlib import Path
from typing import List, Sequence

from fastapi.concurrency import run_in_threadpool

from promo_report.core.config import Settings
from promo_report.markdown_converter import convert
from promo_report.report_exporter import build_report
from promo_report.services.analysis_client import AnalysisClient, build_prompt, combine_extracted_texts
from promo_report.services.ocr_service import OcrService

logger = logging.getLogger(__name__)

REPORT_FILENAME = "analysis.docx"
ANALYSIS_FILENAME = "analysis.json"
COMBINED_TEXT_FILENAME = "combined_extracted_text.txt"
ARCHIVE_REPORT_NAME = "Competitor_Analysis.docx"
ARCHIVE_TEXT_NAME = "Extracted_Text.txt"

IMAGE_SUFFIXES = frozenset({".png", ".jpg", ".jpeg", ".gif", ".bmp", ".tif", ".tiff", ".webp"})
_SESSION_ID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$")


class UnsupportedImageError(RuntimeError):
    """Raised when an uploaded file is not an image."""


class UploadTooLargeError(ValueError):
    """Raised when the combined upload exceeds the configured limit."""


@dataclass
class UploadedImage:
    filename: str
    content: bytes
    content_type: str | None = None


@dataclass
class StoredImage:
    name: str
    path: Path


@dataclass
class ReportResult:
    session_id: str
    image_count: int
    analysis: str
    report_path: Path


def new_session_id() -> str:
    return str(uuid.uuid4())


def validate_session_id(session_id: str) -> str:
    if not session_id or not _SESSION_ID_RE.match(session_id):
        raise ValueError("Invalid session ID format")
    return session_id


def _sanitize_filename(value: str) -> str:
    """Return a filesystem-safe version of an uploaded file name."""

    sanitized = re.sub(r"[^0-9A-Za-z._-]+", "_", Path(value).name).strip("._")
    return sanitized or "image"


def _is_image(upload: UploadedImage) -> bool:
    if upload.content_type and upload.content_type.startswith("image/"):
        return True
    return Path(upload.filename or "").suffix.lower() in IMAGE_SUFFIXES


class ReportPipeline:
    """Turn a batch of uploaded photographs into a downloadable report."""

    def __init__(self, settings: Settings, ocr: OcrService, analysis_client: AnalysisClient) -> None:
        self._settings = settings
        self._ocr = ocr
        self._client = analysis_client

    def session_dir(self, session_id: str) -> Path:
        return Path(self._settings.upload_dir) / validate_session_id(session_id)

    def check_uploads(self, uploads: Sequence[UploadedImage]) -> None:
        if not uploads:
            raise ValueError("No images were uploaded")
        for upload in uploads:
            if not _is_image(upload):
                raise UnsupportedImageError(f"File '{upload.filename}' is not a supported image")
        total = sum(len(upload.content) for upload in uploads)
        if total > self._settings.max_upload_bytes:
            raise UploadTooLargeError(
                f"Upload of {total} bytes exceeds the limit of {self._settings.max_upload_bytes} bytes"
            )

    def save_uploads(self, session_id: str, uploads: Sequence[UploadedImage]) -> List[StoredImage]:
        directory = self.session_dir(session_id)
        directory.mkdir(parents=True, exist_ok=True)
        stored: List[StoredImage] = []
        for upload in uploads:
            name = upload.filename or "image"
            path = directory / f"{uuid.uuid4()}-{_sanitize_filename(name)}"
            path.write_bytes(upload.content)
            stored.append(StoredImage(name=name, path=path))
        logger.info("Saved %s images for session %s", len(stored), session_id)
        return stored

    async def run(self, session_id: str, uploads: Sequence[UploadedImage]) -> ReportResult:
        """Process ``uploads`` end to end and write the report to disk."""

        self.check_uploads(uploads)
        directory = self.session_dir(session_id)
        stored = self.save_uploads(session_id, uploads)

        results = await run_in_threadpool(
            self._ocr.extract_many,
            [(image.name, image.path) for image in stored],
            session_id,
        )
        for image, result in zip(stored, results):
            image.path.with_name(f"{image.path.name}-extracted.txt").write_text(result.text, encoding="utf-8")

        combined = combine_extracted_texts(results)
        (directory / COMBINED_TEXT_FILENAME).write_text(combined, encoding="utf-8")

        prompt = build_prompt(self._settings.analysis_prompt_template, combined)
        analysis = await self._client.analyze(self._settings.system_prompt, prompt)

        generated_at = datetime.now(timezone.utc)
        analysis_record = {
            "timestamp": generated_at.isoformat(),
            "image_count": len(stored),
            "analysis": analysis,
        }
        (directory / ANALYSIS_FILENAME).write_text(
            json.dumps(analysis_record, ensure_ascii=False),
            encoding="utf-8",
        )

        payload = build_report(
            convert(analysis),
            title=self._settings.report_title,
            image_count=len(stored),
            generated_at=generated_at,
            images=[(image.name, image.path) for image in stored],
        )
        report_path = directory / REPORT_FILENAME
        report_path.write_bytes(payload)
        logger.info("Report for session %s written to %s", session_id, report_path)

        return ReportResult(
            session_id=session_id,
            image_count=len(stored),
            analysis=analysis,
            report_path=report_path,
        )

    def package(self, session_id: str) -> bytes:
        """Return a zip archive with the report of ``session_id``."""

        directory = self.session_dir(session_id)
        report_path = directory / REPORT_FILENAME
        if not report_path.exists():
            raise FileNotFoundError(f"No report found for session {session_id}")

        buffer = BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=6) as archive:
            archive.write(report_path, ARCHIVE_REPORT_NAME)
            text_path = directory / COMBINED_TEXT_FILENAME
            if text_path.exists():
                archive.write(text_path, ARCHIVE_TEXT_NAME)
        return buffer.getvalue()
