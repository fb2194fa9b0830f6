"""
snipshare.db.repositories

Repository package.

Responsibilities:
- Group entity-specific queries that run inside a `Storage.session()` unit of work.
"""

# Package marker; repositories are imported directly from submodules.


# --- Module Notes -----------------------------------------------------------
# Repositories are intentionally thin; business rules belong in services.
