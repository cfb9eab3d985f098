"""Contract tests for the Gemini generateContent client."""

from __future__ import annotations

import base64
import io
import json
import unittest
from unittest import mock
from urllib import error as urllib_error

from cardscan.errors import TextExtractionError
from cardscan.extraction.gemini_extractor import GeminiVisionClient, get_text_extraction_prompt

_URLOPEN = "cardscan.extraction.gemini_extractor.urllib_request.urlopen"


def _response(payload: dict) -> mock.MagicMock:
    response = mock.MagicMock()
    response.__enter__.return_value.read.return_value = json.dumps(payload).encode("utf-8")
    return response


class GeminiVisionClientTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = GeminiVisionClient(
            api_key="test-key",
            model="gemini-test",
            base_url="https://gemini.example/v1beta/",
            timeout_seconds=5,
        )

    def test_request_carries_prompt_and_inline_image(self) -> None:
        payload = {"candidates": [{"content": {"parts": [{"text": "Jane Doe\n"}, {"text": "CEO"}]}}]}
        with mock.patch(_URLOPEN, return_value=_response(payload)) as urlopen:
            text = self.client.extract_text(b"image-bytes", "image/png")

        self.assertEqual(text, "Jane Doe\nCEO")
        request = urlopen.call_args.args[0]
        self.assertEqual(request.full_url, "https://gemini.example/v1beta/models/gemini-test:generateContent")
        self.assertEqual(request.get_method(), "POST")
        self.assertEqual(request.get_header("X-goog-api-key"), "test-key")
        self.assertEqual(urlopen.call_args.kwargs["timeout"], 5)

        body = json.loads(request.data.decode("utf-8"))
        parts = body["contents"][0]["parts"]
        self.assertEqual(parts[0]["text"], get_text_extraction_prompt())
        self.assertEqual(parts[1]["inline_data"]["mime_type"], "image/png")
        self.assertEqual(base64.b64decode(parts[1]["inline_data"]["data"]), b"image-bytes")

    def test_model_name_reports_configured_model(self) -> None:
        self.assertEqual(self.client.model_name, "gemini-test")

    def test_http_error_becomes_extraction_error(self) -> None:
        http_error = urllib_error.HTTPError(
            "https://gemini.example", 503, "Service Unavailable", {}, io.BytesIO(b"overloaded")
        )
        with mock.patch(_URLOPEN, side_effect=http_error):
            with self.assertRaises(TextExtractionError) as ctx:
                self.client.extract_text(b"image-bytes", "image/png")

        self.assertIn("503", ctx.exception.message)
        self.assertIn("overloaded", ctx.exception.message)

    def test_network_error_becomes_extraction_error(self) -> None:
        with mock.patch(_URLOPEN, side_effect=urllib_error.URLError("connection refused")):
            with self.assertRaises(TextExtractionError):
                self.client.extract_text(b"image-bytes", "image/png")

    def test_blocked_prompt_is_reported(self) -> None:
        payload = {"promptFeedback": {"blockReason": "SAFETY"}}
        with mock.patch(_URLOPEN, return_value=_response(payload)):
            with self.assertRaises(TextExtractionError) as ctx:
                self.client.extract_text(b"image-bytes", "image/png")

        self.assertIn("SAFETY", ctx.exception.message)

    def test_candidate_without_content_reports_finish_reason(self) -> None:
        payload = {"candidates": [{"finishReason": "RECITATION"}]}
        with mock.patch(_URLOPEN, return_value=_response(payload)):
            with self.assertRaises(TextExtractionError) as ctx:
                self.client.extract_text(b"image-bytes", "image/png")

        self.assertIn("RECITATION", ctx.exception.message)

    def test_response_without_text_parts_fails(self) -> None:
        payload = {"candidates": [{"content": {"parts": [{"inline_data": {}}]}}]}
        with mock.patch(_URLOPEN, return_value=_response(payload)):
            with self.assertRaises(TextExtractionError):
                self.client.extract_text(b"image-bytes", "image/png")

    def test_non_json_body_fails(self) -> None:
        response = mock.MagicMock()
        response.__enter__.return_value.read.return_value = b"<html>bad gateway</html>"
        with mock.patch(_URLOPEN, return_value=response):
            with self.assertRaises(TextExtractionError):
                self.client.extract_text(b"image-bytes", "image/png")


class ExtractionPromptTests(unittest.TestCase):
    def test_prompt_asks_for_plain_text(self) -> None:
        prompt = get_text_extraction_prompt()

        self.assertTrue(prompt)
        self.assertIn("text", prompt.lower())

    def test_unknown_prompt_version_fails(self) -> None:
        with self.assertRaises(TextExtractionError):
            get_text_extraction_prompt("extract_text.v0")


if __name__ == "__main__":
    unittest.main()
