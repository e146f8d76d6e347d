"""Client for the OpenAI compatible chat completions API used for analysis."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

import httpx

from promo_report.services.ocr_service import OcrResult

logger = logging.getLogger(__name__)

EMPTY_ANALYSIS = "No analysis generated"
IMAGE_SEPARATOR = "\n\n---\n\n"


class AnalysisError(RuntimeError):
    """Raised when the language model cannot produce an analysis."""


def combine_extracted_texts(results: Iterable[OcrResult]) -> str:
    """Join per-image OCR output into one document for the prompt."""

    return IMAGE_SEPARATOR.join(f"## Image: {result.name}\n\n{result.text}" for result in results)


def build_prompt(template: str, extracted_text: str) -> str:
    return template.replace("{extracted_text}", extracted_text)


def extract_content(data: Dict[str, Any]) -> str:
    """Return the message content of the first completion choice."""

    choices = data.get("choices") if isinstance(data, dict) else None
    if not isinstance(choices, list) or not choices:
        return ""
    message = choices[0].get("message") if isinstance(choices[0], dict) else None
    if not isinstance(message, dict):
        return ""
    content = message.get("content")
    return content.strip() if isinstance(content, str) else ""


class AnalysisClient:
    """Minimal asynchronous chat completions client."""

    def __init__(
        self,
        base_url: str,
        *,
        api_key: Optional[str] = None,
        model: str = "deepseek-reasoner",
        max_tokens: int = 4000,
        timeout: float = 300.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.model = model
        self._api_key = api_key
        self._max_tokens = max_tokens
        self._timeout = timeout
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        if not self._api_key:
            return {}
        return {"Authorization": f"Bearer {self._api_key}"}

    async def chat(self, messages: List[Dict[str, str]]) -> Dict[str, Any]:
        payload = {
            "model": self.model,
            "messages": messages,
            "max_tokens": self._max_tokens,
        }
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            response = await client.post(
                f"{self.base_url}/chat/completions",
                json=payload,
                headers=self._headers(),
            )
            response.raise_for_status()
            return response.json()

    async def analyze(self, system_prompt: str, user_prompt: str) -> str:
        """Send the prompts to the model and return the analysis text."""

        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        logger.info("Requesting analysis from model '%s'", self.model)
        try:
            data = await self.chat(messages)
        except httpx.HTTPStatusError as exc:
            logger.error("LLM returned HTTP %s: %s", exc.response.status_code, exc.response.text)
            raise AnalysisError(f"Language model returned HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            logger.error("Error talking to the language model: %s", exc)
            raise AnalysisError("Could not reach the language model") from exc
        except ValueError as exc:
            raise AnalysisError("Language model returned a non-JSON payload") from exc

        return extract_content(data) or EMPTY_ANALYSIS
