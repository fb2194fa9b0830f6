"""
snipshare.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, the generic storage collaborator
  and entity repositories.
"""

# Package marker.
