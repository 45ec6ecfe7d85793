"""
process_registry.observability

Structured logging setup and request-scoped log context.
"""
