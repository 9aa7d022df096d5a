"""
record_authz.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, and repositories for protected records.
"""

# Package marker.
