"""
process_registry.services

Application services layer.

Responsibilities:
- Enforce registry invariants (existence, uniqueness, hierarchy) on top of repositories.
- Own transaction boundaries and translate store failures into domain errors.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services are constructed per request with the request-scoped AsyncSession.
