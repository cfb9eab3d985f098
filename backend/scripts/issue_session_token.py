"""Mint a development session token for a user id.

Usage (from backend/):
    python scripts/issue_session_token.py dev-user-1
    curl -H "Authorization: Bearer <token>" http://localhost:8000/ocr-responses
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from cardscan.auth.identity import SessionTokenSigner
from cardscan.config import get_settings


def main() -> None:
    parser = argparse.ArgumentParser(description="Print a signed session token.")
    parser.add_argument("user_id")
    args = parser.parse_args()

    settings = get_settings()
    signer = SessionTokenSigner(settings.session_secret, max_age_seconds=settings.session_max_age_seconds)
    print(signer.issue(args.user_id))


if __name__ == "__main__":
    main()
