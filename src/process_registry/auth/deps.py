"""
process_registry.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Build the `RequestContext` for the matched route and run the guard chain on it.
- Expose the verified `Claims` to handlers.
"""

from __future__ import annotations

import uuid

import structlog
from fastapi import Depends, Request

from process_registry.auth.guards import GuardChain
from process_registry.auth.models import Claims, RequestContext
from process_registry.auth.routes import RouteTable
from process_registry.errors import MissingCredentials


def _route_id(request: Request) -> str:
    # FastAPI stores the matched APIRoute in the ASGI scope; its `name` is the route id.
    route = request.scope.get("route")
    return getattr(route, "name", "") or ""


def request_context(request: Request) -> RequestContext:
    table: RouteTable = request.app.state.route_table
    chain: GuardChain = request.app.state.guard_chain

    ctx = RequestContext(
        # Set by RequestContextMiddleware; absent only when the middleware is not installed.
        request_id=getattr(request.state, "request_id", None) or str(uuid.uuid4()),
        authorization=request.headers.get("authorization"),
    )
    chain.check(ctx, table.resolve(_route_id(request)))

    if ctx.claims is not None:
        structlog.contextvars.bind_contextvars(user_id=ctx.claims.subject)
    return ctx


def current_claims(ctx: RequestContext = Depends(request_context)) -> Claims:
    if ctx.claims is None:
        raise MissingCredentials()
    return ctx.claims


# --- Module Notes -----------------------------------------------------------
# `request_context` is installed as an app-wide dependency (see `api.app`), so every
# route is guarded; FastAPI caches it per request, so handlers that also depend on
# it receive the same context instance.
