"""
record_authz.services

Service layer.

Responsibilities:
- Own transactions and run resource-scoped authorization checks before reads/writes.
"""

# Package marker.
