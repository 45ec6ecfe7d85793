"""
process_registry.db

Persistence package (SQLAlchemy 2 async).

Responsibilities:
- ORM models for users, departments, processes and process documents.
- Engine/session factories and per-entity repositories.
"""


# --- Module Notes -----------------------------------------------------------
# Referential integrity (dangling references, dependent rows on delete) is enforced
# by the database; services translate `IntegrityError` into registry errors.
