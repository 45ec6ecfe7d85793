"""
process_registry.api.route_table

Access policy for every route this service exposes.

Route ids are the FastAPI route `name`s; dotted prefixes act as scopes.
"""

from __future__ import annotations

from process_registry.auth.routes import RouteTable

ROLE_ADMIN = "admin"


def build_route_table() -> RouteTable:
    table = RouteTable()
    table.register("auth.login", public=True)
    table.register("health", public=True)

    # Department writes are admin-only; reads are open to any authenticated identity.
    table.register("departments", roles={ROLE_ADMIN})
    table.register("departments.list", roles=())
    table.register("departments.get", roles=())

    # Processes: any authenticated identity, except deletion.
    table.register("processes.remove", roles={ROLE_ADMIN})
    return table
