"""
process_registry.auth.tokens

JWT issuing and verification (Token Service).

Responsibilities:
- Issue signed tokens for an `Identity` with a configured lifetime.
- Verify signature, expiry and registered claims; distinguish expiry from other failures.

Note:
- Stateless: validity is a pure function of signature + expiry; there is no revocation list.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError

from process_registry.auth.models import Claims, Identity
from process_registry.errors import ConfigError
from process_registry.settings import Settings


@dataclass(frozen=True, slots=True)
class JwtConfig:
    # Algorithm/issuer/audience are enforced during decoding.
    alg: str
    issuer: str
    audience: str
    secret: str | None
    lifetime: timedelta = timedelta(days=1)

    @classmethod
    def from_settings(cls, settings: Settings) -> JwtConfig:
        return cls(
            alg=settings.jwt_alg,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            secret=settings.jwt_secret,
            lifetime=settings.token_lifetime,
        )


class InvalidToken(Exception):
    pass


class TokenExpired(InvalidToken):
    pass


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class TokenService:
    def __init__(self, cfg: JwtConfig, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._cfg = cfg
        self._clock = clock

    def _secret(self) -> str:
        if not self._cfg.secret:
            raise ConfigError("JWT signing secret is not configured")
        return self._cfg.secret

    def issue(self, identity: Identity) -> str:
        secret = self._secret()
        now = self._clock()
        # Keep payload minimal and stable; the display name stays out of the token.
        payload: dict[str, Any] = {
            "iss": self._cfg.issuer,
            "aud": self._cfg.audience,
            "sub": str(identity.id),
            "email": identity.email,
            "role": identity.role,
            "iat": int(now.timestamp()),
            "exp": int((now + self._cfg.lifetime).timestamp()),
        }
        return jwt.encode(payload, secret, algorithm=self._cfg.alg)

    def verify(self, token: str) -> Claims:
        secret = self._secret()
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self._cfg.alg],
                issuer=self._cfg.issuer,
                audience=self._cfg.audience,
                # Time claims are checked below against the injected clock, not the wall clock.
                options={
                    "require": ["exp", "iat", "iss", "aud", "sub"],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except InvalidTokenError as e:
            raise InvalidToken(str(e)) from e

        try:
            claims = Claims.from_payload(payload)
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidToken(f"malformed claims: {e}") from e

        if claims.expires_at <= int(self._clock().timestamp()):
            raise TokenExpired("Signature has expired")
        return claims


# --- Module Notes -----------------------------------------------------------
# Token issuing is used by `services.auth_service` (login); verification by
# `auth.guards.AccessGuard`.
