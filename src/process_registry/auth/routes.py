"""
process_registry.auth.routes

Explicit route access table.

Responsibilities:
- Map dotted route ids (e.g. `processes.remove`) to access rules.
- Resolve the effective metadata for a route with handler-over-scope precedence.

Precedence:
- A route id is resolved by walking `processes.remove` -> `processes` -> root.
- Each attribute (public flag, required roles) takes the first explicit declaration found,
  so a handler-level rule overrides its scope. An explicit empty role set means
  "no restriction" and still overrides a broader declaration.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RouteRule:
    # None means "not declared here"; resolution keeps walking to broader scopes.
    public: bool | None = None
    roles: frozenset[str] | None = None


@dataclass(frozen=True, slots=True)
class RouteMetadata:
    route_id: str
    is_public: bool = False
    required_roles: frozenset[str] = frozenset()


def _scopes(route_id: str) -> Iterator[str]:
    parts = route_id.split(".") if route_id else []
    for end in range(len(parts), 0, -1):
        yield ".".join(parts[:end])
    yield ""


class RouteTable:
    def __init__(self) -> None:
        self._rules: dict[str, RouteRule] = {}

    def register(
        self,
        route_id: str,
        *,
        public: bool | None = None,
        roles: Iterable[str] | None = None,
    ) -> RouteTable:
        self._rules[route_id] = RouteRule(
            public=public,
            roles=frozenset(roles) if roles is not None else None,
        )
        return self

    def resolve(self, route_id: str) -> RouteMetadata:
        public: bool | None = None
        roles: frozenset[str] | None = None
        for scope in _scopes(route_id):
            rule = self._rules.get(scope)
            if rule is None:
                continue
            if public is None and rule.public is not None:
                public = rule.public
            if roles is None and rule.roles is not None:
                roles = rule.roles
            if public is not None and roles is not None:
                break
        return RouteMetadata(
            route_id=route_id,
            is_public=bool(public),
            required_roles=roles or frozenset(),
        )


# --- Module Notes -----------------------------------------------------------
# The concrete table for this service is built in `api.route_table`.
