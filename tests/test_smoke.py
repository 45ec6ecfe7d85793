"""
tests.test_smoke

Minimal smoke tests to validate the service can boot and serve public endpoints.
"""

from __future__ import annotations

import httpx
import pytest

from process_registry import __version__


@pytest.mark.asyncio
async def test_health_endpoints_are_public(client: httpx.AsyncClient) -> None:
    r = await client.get("/healthz")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "service": "process-registry", "version": __version__}

    r = await client.get("/readyz")
    assert r.status_code == 200
    assert r.json()["status"] == "ready"


@pytest.mark.asyncio
async def test_request_id_is_echoed(client: httpx.AsyncClient) -> None:
    r = await client.get("/healthz", headers={"x-request-id": "req-123"})
    assert r.headers["x-request-id"] == "req-123"

    r = await client.get("/healthz")
    assert r.headers["x-request-id"]


@pytest.mark.asyncio
async def test_oversized_request_id_is_replaced(client: httpx.AsyncClient) -> None:
    r = await client.get("/healthz", headers={"x-request-id": "x" * 500})
    assert r.status_code == 200
    assert r.headers["x-request-id"] != "x" * 500
    assert len(r.headers["x-request-id"]) == 36
