"""Run a real text extraction call against one image file.

Usage (from repo root):
    python backend/scripts/smoke_text_extractor.py path/to/card.jpg

Usage (from backend/):
    python scripts/smoke_text_extractor.py path/to/card.png
"""

from __future__ import annotations

import argparse
import json
import mimetypes
import sys
from dataclasses import asdict
from pathlib import Path

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from cardscan.config import get_settings
from cardscan.parsing.card_parser import parse_card_text
from cardscan.services.extraction import get_text_extractor, validate_image_payload


def main() -> None:
    parser = argparse.ArgumentParser(description="Extract text from one image with the configured vision model.")
    parser.add_argument("image", type=Path)
    args = parser.parse_args()

    settings = get_settings()
    image_bytes = args.image.read_bytes()
    guessed_type, _ = mimetypes.guess_type(args.image.name)
    mime_type = validate_image_payload(image_bytes, guessed_type, max_bytes=settings.max_upload_bytes)

    extractor = get_text_extractor(settings)
    text = extractor.extract_text(image_bytes, mime_type)
    fields = parse_card_text(text)
    print(
        json.dumps(
            {
                "model": extractor.model_name,
                "mime_type": mime_type,
                "extracted_text": text,
                "card": {**asdict(fields), "avatar": fields.avatar},
            },
            indent=2,
        )
    )


if __name__ == "__main__":
    main()
