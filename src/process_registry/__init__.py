"""
process_registry

Department and business-process registry service (FastAPI + SQLAlchemy).
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
