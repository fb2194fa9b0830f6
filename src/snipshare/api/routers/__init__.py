"""
snipshare.api.routers

HTTP routers: GraphQL endpoint and health probes.
"""

# Package marker.
