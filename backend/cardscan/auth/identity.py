"""Caller identity resolved from a signed session token."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from fastapi import Depends, Request
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from cardscan.config import Settings, get_settings
from cardscan.errors import AuthorizationError

logger = logging.getLogger(__name__)

_SESSION_SALT = "cardscan.session"


@dataclass(frozen=True, slots=True)
class CallerIdentity:
    """Authenticated user on whose behalf a store call runs."""

    user_id: str


class SessionTokenSigner:
    """Signs and verifies session payloads shared with the identity provider."""

    def __init__(self, secret_key: str, *, max_age_seconds: int) -> None:
        self.serializer = URLSafeTimedSerializer(secret_key, salt=_SESSION_SALT)
        self.max_age_seconds = max_age_seconds

    def issue(self, user_id: str, **claims: Any) -> str:
        """Return a signed token for a user id."""

        return self.serializer.dumps({"user_id": user_id, **claims})

    def verify(self, token: str) -> CallerIdentity:
        """Return the identity carried by a token or raise AuthorizationError."""

        try:
            payload = self.serializer.loads(token, max_age=self.max_age_seconds)
        except SignatureExpired as exc:
            logger.warning("auth.session_expired")
            raise AuthorizationError("Session expired. Please sign in again.") from exc
        except BadSignature as exc:
            logger.warning("auth.session_invalid_signature")
            raise AuthorizationError() from exc

        user_id = payload.get("user_id") if isinstance(payload, dict) else None
        if not isinstance(user_id, str) or not user_id.strip():
            raise AuthorizationError()
        return CallerIdentity(user_id=user_id.strip())


def get_session_signer(settings: Settings = Depends(get_settings)) -> SessionTokenSigner:
    return SessionTokenSigner(settings.session_secret, max_age_seconds=settings.session_max_age_seconds)


def _read_token(request: Request, cookie_name: str) -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return request.cookies.get(cookie_name) or None


def get_optional_caller_identity(
    request: Request,
    settings: Settings = Depends(get_settings),
    signer: SessionTokenSigner = Depends(get_session_signer),
) -> CallerIdentity | None:
    """Resolve the caller when a token is present; anonymous otherwise."""

    token = _read_token(request, settings.session_cookie_name)
    if token is None:
        return None
    return signer.verify(token)


def get_caller_identity(
    caller: CallerIdentity | None = Depends(get_optional_caller_identity),
) -> CallerIdentity:
    """Require an authenticated caller."""

    if caller is None:
        raise AuthorizationError()
    return caller
