"""
record_authz.api

HTTP layer (FastAPI) around the authorization engine.

Responsibilities:
- App factory, dependency wiring, and routers.
"""

# Package marker.
