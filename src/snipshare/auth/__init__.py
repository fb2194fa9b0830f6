"""
snipshare.auth

Authentication package.

Responsibilities:
- JWT helpers and validation.
- Password hashing.
- Per-request identity context construction.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Authorization (roles on resources) lives in `snipshare.authz`, not here.
