"""
process_registry.api.__main__

`python -m process_registry.api` / `process-registry` entrypoint.
"""

from __future__ import annotations

import uvicorn

from process_registry.api.app import create_app
from process_registry.observability.logging import get_logger
from process_registry.settings import get_settings

log = get_logger(__name__)


def main() -> None:
    settings = get_settings()
    app = create_app(settings=settings)
    if not settings.jwt_secret:
        # The service still starts (health checks answer) but every protected route fails.
        log.warning("jwt_secret_missing", env=settings.env)

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,
        # `RequestContextMiddleware` emits the access event with the request id attached.
        access_log=False,
    )


if __name__ == "__main__":
    main()
