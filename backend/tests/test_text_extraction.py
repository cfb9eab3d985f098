"""Tests for upload validation and the extract-then-store flow."""

from __future__ import annotations

import unittest

from sqlalchemy import create_engine, delete, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from cardscan.auth.identity import CallerIdentity
from cardscan.config import Settings
from cardscan.errors import ConfigurationError, InputValidationError, TextExtractionError
from cardscan.extraction.extractor_interface import TextExtractorInterface
from cardscan.extraction.gemini_extractor import GeminiVisionClient
from cardscan.models.base import Base
from cardscan.models.ocr_response import OcrResponse
from cardscan.services.extraction import get_text_extractor, run_text_extraction, validate_image_payload

ALICE = CallerIdentity(user_id="user-alice")
PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"


class _StubExtractor(TextExtractorInterface):
    model_name = "stub-vision"

    def __init__(self, text: str = "", error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.calls: list[tuple[bytes, str]] = []

    def extract_text(self, image_bytes: bytes, mime_type: str) -> str:
        self.calls.append((image_bytes, mime_type))
        if self.error is not None:
            raise self.error
        return self.text


class ImagePayloadValidationTests(unittest.TestCase):
    def test_normalizes_mime_type(self) -> None:
        self.assertEqual(validate_image_payload(PNG_BYTES, "Image/PNG; charset=binary", max_bytes=1024), "image/png")

    def test_rejects_empty_upload(self) -> None:
        with self.assertRaises(InputValidationError):
            validate_image_payload(b"", "image/png", max_bytes=1024)

    def test_rejects_non_image_type(self) -> None:
        with self.assertRaises(InputValidationError):
            validate_image_payload(PNG_BYTES, "application/pdf", max_bytes=1024)
        with self.assertRaises(InputValidationError):
            validate_image_payload(PNG_BYTES, None, max_bytes=1024)

    def test_rejects_oversized_upload(self) -> None:
        with self.assertRaises(InputValidationError):
            validate_image_payload(b"x" * 11, "image/png", max_bytes=10)
        self.assertEqual(validate_image_payload(b"x" * 10, "image/png", max_bytes=10), "image/png")


class ExtractorFactoryTests(unittest.TestCase):
    def test_missing_api_key_is_a_configuration_error(self) -> None:
        with self.assertRaises(ConfigurationError) as ctx:
            get_text_extractor(Settings(gemini_api_key=None))

        self.assertEqual(ctx.exception.status_code, 500)

    def test_builds_gemini_client_from_settings(self) -> None:
        extractor = get_text_extractor(Settings(gemini_api_key="test-key", gemini_model="gemini-test"))

        self.assertIsInstance(extractor, GeminiVisionClient)
        self.assertEqual(extractor.model_name, "gemini-test")


class RunTextExtractionTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.engine = create_engine(
            "sqlite+pysqlite:///:memory:",
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        cls.SessionLocal = sessionmaker(bind=cls.engine, autoflush=False, autocommit=False, future=True)
        Base.metadata.create_all(cls.engine)

    @classmethod
    def tearDownClass(cls) -> None:
        Base.metadata.drop_all(cls.engine)
        cls.engine.dispose()

    def setUp(self) -> None:
        self.db: Session = self.SessionLocal()
        self.db.execute(delete(OcrResponse))
        self.db.commit()

    def tearDown(self) -> None:
        self.db.close()

    def test_successful_extraction_is_persisted_with_metadata(self) -> None:
        extractor = _StubExtractor(text="Jane Doe\nCEO\nAcme Corp")

        record = run_text_extraction(
            self.db,
            extractor,
            image_bytes=PNG_BYTES,
            mime_type="image/png",
            caller=ALICE,
            original_name="card.png",
        )

        self.assertEqual(extractor.calls, [(PNG_BYTES, "image/png")])
        self.assertEqual(record.extracted_text, "Jane Doe\nCEO\nAcme Corp")
        self.assertEqual(record.user_id, ALICE.user_id)
        self.assertEqual(record.original_name, "card.png")
        self.assertEqual(record.image_size, len(PNG_BYTES))
        self.assertEqual(record.mime_type, "image/png")
        self.assertGreaterEqual(record.processing_time, 0)
        self.assertFalse(record.is_demo)

    def test_demo_extraction_is_unowned(self) -> None:
        record = run_text_extraction(
            self.db,
            _StubExtractor(text="demo"),
            image_bytes=PNG_BYTES,
            mime_type="image/jpeg",
            caller=None,
            is_demo=True,
        )

        self.assertIsNone(record.user_id)
        self.assertTrue(record.is_demo)

    def test_empty_text_is_stored_as_empty_string(self) -> None:
        record = run_text_extraction(
            self.db,
            _StubExtractor(text=""),
            image_bytes=PNG_BYTES,
            mime_type="image/png",
            caller=ALICE,
        )

        self.assertEqual(record.extracted_text, "")

    def test_failed_extraction_stores_nothing(self) -> None:
        extractor = _StubExtractor(error=TextExtractionError("Gemini HTTP 503: unavailable"))

        with self.assertLogs("cardscan.services.extraction", level="ERROR"):
            with self.assertRaises(TextExtractionError):
                run_text_extraction(
                    self.db,
                    extractor,
                    image_bytes=PNG_BYTES,
                    mime_type="image/png",
                    caller=ALICE,
                )

        self.assertEqual(self.db.scalars(select(OcrResponse)).all(), [])

    def test_invalid_upload_never_reaches_extractor(self) -> None:
        extractor = _StubExtractor(text="unused")

        with self.assertRaises(InputValidationError):
            run_text_extraction(
                self.db,
                extractor,
                image_bytes=PNG_BYTES,
                mime_type="text/plain",
                caller=ALICE,
            )

        self.assertEqual(extractor.calls, [])
        self.assertEqual(self.db.scalars(select(OcrResponse)).all(), [])


if __name__ == "__main__":
    unittest.main()
