"""Seed sample contacts for one user.

Usage (from repository root):
    python backend/scripts/seed_contacts.py --user-id <user-id>

Usage (from backend directory):
    python scripts/seed_contacts.py --user-id <user-id> --reset
"""

from __future__ import annotations

import argparse
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

from sqlalchemy import delete

# Make `cardscan` imports work whether the script is run from repo root or backend/.
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from cardscan.auth.identity import CallerIdentity
from cardscan.db.base import Base
from cardscan.db.session import SessionLocal, engine
from cardscan.models.contact import Contact
from cardscan.schemas.contact import ContactWrite
from cardscan.services.contacts import create_contact


def build_sample_contacts(now: datetime) -> list[ContactWrite]:
    """Return a deterministic set of sample contacts across every status."""

    day = timedelta(days=1)
    rows = [
        ("Sarah Johnson", "CEO", "Tech Innovations", "sarah@techinnovations.com", "+1-555-0123", "new", ["tech", "startup"], None),
        ("Michael Chen", "CTO", "Digital Solutions", "michael@digitalsolutions.com", "+1-555-0456", "active", ["tech", "development"], now - day),
        ("Emma Williams", "Designer", "Creative Agency", "emma@creativeagency.com", "+1-555-0789", "pending", ["design", "creative"], now - 2 * day),
        ("David Rodriguez", "Marketing Director", "Growth Labs", "david@growthlabs.com", "+1-555-0321", "active", ["marketing", "growth"], now - 3 * day),
        ("Lisa Park", "Sales Manager", "Northwind Traders", "lisa@northwind.example", "+1-555-0654", "inactive", ["sales"], now - 45 * day),
    ]
    return [
        ContactWrite(
            name=name,
            title=title,
            company=company,
            email=email,
            phone=phone,
            status=status,
            tags=tags,
            last_contact=last_contact,
        )
        for name, title, company, email, phone, status, tags, last_contact in rows
    ]


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed sample contacts for one user.")
    parser.add_argument("--user-id", required=True, help="Owner of the seeded contacts.")
    parser.add_argument("--reset", action="store_true", help="Delete the user's contacts first.")
    args = parser.parse_args()

    Base.metadata.create_all(bind=engine)
    caller = CallerIdentity(user_id=args.user_id)
    with SessionLocal() as db:
        if args.reset:
            db.execute(delete(Contact).where(Contact.user_id == caller.user_id))
            db.commit()
        created = [
            create_contact(db, caller, payload)
            for payload in build_sample_contacts(datetime.now(timezone.utc))
        ]
    print(f"Seeded {len(created)} contacts for user {caller.user_id}.")


if __name__ == "__main__":
    main()
