"""
process_registry.auth

Authentication/authorization package.

Responsibilities:
- Token issuing and verification (Token Service).
- Route access table and the guard chain (Access Guard, Role Guard).
- FastAPI dependencies exposing the request-scoped auth context.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing in this package touches the database; login lives in `services.auth_service`.
