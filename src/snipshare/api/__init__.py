"""
snipshare.api

API package for the snipshare service.

Responsibilities:
- FastAPI app factory and router modules.
- API-layer dependency wiring and GraphQL error presentation.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer stays thin: transport + context building; field logic lives in
# `snipshare.schema`.
