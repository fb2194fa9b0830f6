"""
snipshare.services

Service layer package.

Responsibilities:
- Own multi-step domain operations and their transaction boundaries.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# GraphQL resolvers stay thin and delegate here.
