"""
process_registry.auth.guards

Request guard chain.

Responsibilities:
- `AccessGuard`: public-route bypass, bearer extraction, token verification.
- `RoleGuard`: role membership against the route's required roles.
- `GuardChain`: run guards in order; the first rejection wins.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from process_registry.auth.models import RequestContext
from process_registry.auth.routes import RouteMetadata
from process_registry.auth.tokens import InvalidToken, TokenExpired, TokenService
from process_registry.errors import Forbidden, InvalidCredentials, MissingCredentials
from process_registry.observability.logging import get_logger

log = get_logger(__name__)


class Guard(Protocol):
    def check(self, ctx: RequestContext, meta: RouteMetadata) -> None:
        """Return to pass; raise a `RegistryError` to reject."""
        ...


class AccessGuard:
    def __init__(self, tokens: TokenService) -> None:
        self._tokens = tokens

    def check(self, ctx: RequestContext, meta: RouteMetadata) -> None:
        if meta.is_public:
            return

        token = ctx.bearer_token
        if token is None:
            log.info("access_rejected", route=meta.route_id, reason="missing_token")
            raise MissingCredentials()

        try:
            ctx.claims = self._tokens.verify(token)
        except TokenExpired as e:
            log.info("access_rejected", route=meta.route_id, reason="expired")
            raise InvalidCredentials("Token expired") from e
        except InvalidToken as e:
            log.info("access_rejected", route=meta.route_id, reason="invalid_token")
            raise InvalidCredentials("Invalid token") from e


class RoleGuard:
    def check(self, ctx: RequestContext, meta: RouteMetadata) -> None:
        if not meta.required_roles:
            return
        # Exact, case-sensitive membership.
        if ctx.claims is None or ctx.claims.role not in meta.required_roles:
            log.info(
                "role_rejected",
                route=meta.route_id,
                role=ctx.claims.role if ctx.claims else None,
            )
            raise Forbidden()


class GuardChain:
    def __init__(self, guards: Iterable[Guard]) -> None:
        self._guards: list[Guard] = list(guards)

    def append(self, guard: Guard) -> GuardChain:
        self._guards.append(guard)
        return self

    def check(self, ctx: RequestContext, meta: RouteMetadata) -> None:
        for guard in self._guards:
            guard.check(ctx, meta)


def default_chain(tokens: TokenService) -> GuardChain:
    # Authentication must run before authorization.
    return GuardChain([AccessGuard(tokens), RoleGuard()])


# --- Module Notes -----------------------------------------------------------
# New checks compose by appending to the chain; no guard reads global state.
