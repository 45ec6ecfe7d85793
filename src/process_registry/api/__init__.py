"""
process_registry.api

HTTP API package (FastAPI).

Responsibilities:
- App factory, dependency wiring, error mapping and routers.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Routers stay thin: parse input, call a service, shape the response.
