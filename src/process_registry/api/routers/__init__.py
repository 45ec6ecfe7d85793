"""
process_registry.api.routers

HTTP routers; each module exposes a `router`.
"""
