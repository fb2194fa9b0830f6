"""
snipshare.authz

Authorization package.

Responsibilities:
- Role hierarchy model and per-resource membership checks.
- Composable resolver gates (authentication, minimum role).
"""

# Package marker; import gates and roles from their submodules.
