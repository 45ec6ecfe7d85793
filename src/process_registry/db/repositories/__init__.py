"""
process_registry.db.repositories

Repository package.

Responsibilities:
- Group data-access repositories for the persistence layer.
"""

# Import repositories from their submodules.


# --- Module Notes -----------------------------------------------------------
# Repositories never commit; services own transactions and error translation.
