"""Gemini-backed image text extractor."""

from __future__ import annotations

import base64
import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any
from urllib import error as urllib_error
from urllib import parse as urllib_parse
from urllib import request as urllib_request

from cardscan.errors import TextExtractionError
from cardscan.extraction.extractor_interface import TextExtractorInterface

TEXT_EXTRACTION_PROMPT_VERSION = "extract_text.v1"
_PROMPT_FILES: dict[str, Path] = {
    "extract_text.v1": Path(__file__).resolve().parent / "prompts" / "extract_text_v1.txt",
}


@dataclass(slots=True)
class GeminiVisionClient(TextExtractorInterface):
    """Minimal Gemini generateContent client using stdlib HTTP."""

    api_key: str
    model: str = "gemini-2.5-flash"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    timeout_seconds: int = 60

    @property
    def model_name(self) -> str:  # type: ignore[override]
        return self.model

    def extract_text(self, image_bytes: bytes, mime_type: str) -> str:
        """Send the image inline with the instruction prompt and return the text."""

        payload = {
            "contents": [
                {
                    "role": "user",
                    "parts": [
                        {"text": get_text_extraction_prompt()},
                        {
                            "inline_data": {
                                "mime_type": mime_type,
                                "data": base64.b64encode(image_bytes).decode("ascii"),
                            }
                        },
                    ],
                }
            ],
            "generationConfig": {"temperature": 0},
        }
        model_path = urllib_parse.quote(self.model, safe="")
        url = f"{self.base_url.rstrip('/')}/models/{model_path}:generateContent"
        req = urllib_request.Request(
            url=url,
            data=json.dumps(payload).encode("utf-8"),
            method="POST",
            headers={
                "x-goog-api-key": self.api_key,
                "Content-Type": "application/json",
            },
        )

        try:
            with urllib_request.urlopen(req, timeout=self.timeout_seconds) as resp:
                raw = resp.read().decode("utf-8")
        except urllib_error.HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="replace")
            raise TextExtractionError(f"Gemini HTTP {exc.code}: {detail}") from exc
        except urllib_error.URLError as exc:
            raise TextExtractionError(f"Gemini request failed: {exc.reason}") from exc
        except TimeoutError as exc:
            raise TextExtractionError("Gemini request timed out") from exc

        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise TextExtractionError("Gemini returned a non-JSON response") from exc
        return _text_from_response(decoded)


def _text_from_response(decoded: dict[str, Any]) -> str:
    block_reason = (decoded.get("promptFeedback") or {}).get("blockReason")
    if block_reason:
        raise TextExtractionError(f"Gemini blocked the request: {block_reason}")

    try:
        candidate = decoded["candidates"][0]
        parts = candidate["content"]["parts"]
    except (KeyError, IndexError, TypeError) as exc:
        finish_reason = None
        if isinstance(decoded.get("candidates"), list) and decoded["candidates"]:
            finish_reason = decoded["candidates"][0].get("finishReason")
        if finish_reason:
            raise TextExtractionError(f"Gemini returned no content (finishReason={finish_reason})") from exc
        raise TextExtractionError("Gemini returned an unexpected response") from exc

    texts = [part["text"] for part in parts if isinstance(part, dict) and isinstance(part.get("text"), str)]
    if not texts:
        raise TextExtractionError("Gemini response contained no text parts")
    return "".join(texts)


@lru_cache(maxsize=4)
def get_text_extraction_prompt(version: str = TEXT_EXTRACTION_PROMPT_VERSION) -> str:
    prompt_file = _PROMPT_FILES.get(version)
    if prompt_file is None:
        raise TextExtractionError(f"Extraction prompt version is not registered: {version}")
    try:
        prompt_text = prompt_file.read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise TextExtractionError(f"Failed to load extraction prompt file: {prompt_file}") from exc
    if not prompt_text:
        raise TextExtractionError(f"Extraction prompt file is empty: {prompt_file}")
    return prompt_text
