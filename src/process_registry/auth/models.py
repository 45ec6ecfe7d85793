"""
process_registry.auth.models

Auth domain models.

Responsibilities:
- Define the issued `Identity` and the verified token `Claims`.
- Define the request-scoped `RequestContext` threaded through guards and handlers.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Identity:
    """
    Authenticated user as known at login time.
    """

    id: uuid.UUID
    email: str
    role: str
    name: str


@dataclass(frozen=True, slots=True)
class Claims:
    """
    Verified token payload. Display name is not embedded in tokens.
    """

    subject: str
    email: str
    role: str
    issued_at: int
    expires_at: int

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Claims:
        return cls(
            # Subjects are user ids; anything else is a malformed token.
            subject=str(uuid.UUID(str(payload["sub"]))),
            email=str(payload.get("email", "")),
            role=str(payload.get("role", "")),
            issued_at=int(payload["iat"]),
            expires_at=int(payload["exp"]),
        )

    @property
    def user_id(self) -> uuid.UUID:
        return uuid.UUID(self.subject)


@dataclass(slots=True)
class RequestContext:
    """
    Per-request auth state. Guards fill in `claims`; handlers read it.
    """

    request_id: str
    authorization: str | None = None
    claims: Claims | None = None

    @property
    def bearer_token(self) -> str | None:
        if not self.authorization:
            return None
        scheme, _, token = self.authorization.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return None
        return token.strip()


# --- Module Notes -----------------------------------------------------------
# Claims are immutable once verified; a later profile change never alters a live token.
