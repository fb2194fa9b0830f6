"""
snipshare.schema

GraphQL schema package.

Responsibilities:
- SDL type definitions and annotation directives.
- The directive compiler that wraps base resolvers with gates and reference
  expansion.
"""

# Package marker.
