"""Text extraction from uploaded promotion photographs."""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import pytesseract
from PIL import Image

from promo_report.services.progress import ProgressStore

logger = logging.getLogger(__name__)


class OcrError(RuntimeError):
    """Raised when a batch of images cannot be processed at all."""


@dataclass
class OcrResult:
    """Text extracted from a single image."""

    name: str
    text: str
    failed: bool = False


# Currency values are where Tesseract most often confuses digits with letters.
_CURRENCY_FIXES: Tuple[Tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\$(\d+)[Oo]"), r"$\g<1>0"),
    (re.compile(r"\$(\d+)[lI]"), r"$\g<1>1"),
    (re.compile(r"\$[lI]"), "$1"),
)
_CURRENCY_SPACING_RE = re.compile(r"(\$\d+\.\d+)[ \t]+")
_REPEATED_SPACES_RE = re.compile(r"[ \t]{2,}")


def clean_ocr_text(text: str) -> str:
    """Repair common OCR mistakes in currency values and collapse spacing."""

    cleaned = text
    for pattern, replacement in _CURRENCY_FIXES:
        cleaned = pattern.sub(replacement, cleaned)
    cleaned = _CURRENCY_SPACING_RE.sub(r"\1 ", cleaned)
    return _REPEATED_SPACES_RE.sub(" ", cleaned)


def format_elapsed(seconds: float) -> str:
    """Return ``seconds`` as ``"2m 30s"`` or ``"12s"``."""

    total = int(seconds)
    minutes, remaining = divmod(total, 60)
    if minutes:
        return f"{minutes}m {remaining}s"
    return f"{remaining}s"


def estimate_remaining(elapsed: float, completed: int, total: int) -> str:
    if completed == 0:
        return "calculating..."
    return format_elapsed(elapsed / completed * (total - completed))


class OcrService:
    """Run Tesseract over images and report progress per session."""

    def __init__(
        self,
        *,
        language: str = "eng",
        engine_mode: int = 1,
        page_segmentation_mode: int = 3,
        char_whitelist: Optional[str] = None,
        progress: Optional[ProgressStore] = None,
    ) -> None:
        self._language = language
        self._engine_mode = engine_mode
        self._page_segmentation_mode = page_segmentation_mode
        self._char_whitelist = char_whitelist
        self._progress = progress

    @property
    def tesseract_config(self) -> str:
        parts = [
            f"--oem {self._engine_mode}",
            f"--psm {self._page_segmentation_mode}",
            "-c preserve_interword_spaces=1",
        ]
        if self._char_whitelist:
            parts.append(f"-c tessedit_char_whitelist={self._char_whitelist}")
        return " ".join(parts)

    def extract_text(self, path: Path) -> str:
        """Return the cleaned text found in the image at ``path``."""

        with Image.open(path) as image:
            text = pytesseract.image_to_string(image, lang=self._language, config=self.tesseract_config)
        return clean_ocr_text(text)

    def extract_many(
        self,
        images: Sequence[Tuple[str, Path]],
        session_id: Optional[str] = None,
    ) -> List[OcrResult]:
        """Extract text from every ``(name, path)`` pair in order.

        A failing image yields a placeholder text instead of aborting the
        batch.
        """

        total = len(images)
        started = time.monotonic()
        logger.info("Starting OCR processing of %s images", total)
        results: List[OcrResult] = []
        try:
            for index, (name, path) in enumerate(images):
                elapsed = time.monotonic() - started
                logger.info(
                    "Processing image %s/%s (%s), elapsed %s, remaining %s",
                    index + 1,
                    total,
                    name,
                    format_elapsed(elapsed),
                    estimate_remaining(elapsed, index, total),
                )
                if session_id and self._progress is not None:
                    self._progress.set(session_id, index, total)
                results.append(self._extract_one(name, path))
        except Exception as exc:
            if session_id and self._progress is not None:
                self._progress.clear(session_id)
            raise OcrError(f"Batch OCR processing failed: {exc}") from exc

        if session_id and self._progress is not None:
            self._progress.set(session_id, total, total)
            self._progress.finish(session_id)
        logger.info("OCR completed for %s images in %s", total, format_elapsed(time.monotonic() - started))
        return results

    def _extract_one(self, name: str, path: Path) -> OcrResult:
        try:
            text = self.extract_text(path)
        except (pytesseract.TesseractError, OSError) as exc:
            logger.warning("OCR failed for %s: %s", name, exc)
            return OcrResult(name=name, text=f"Failed to extract text from {name}: {exc}", failed=True)
        return OcrResult(name=name, text=text)
