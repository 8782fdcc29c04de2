"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - User is the only aggregate; it is never physically deleted by the application

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all or autogenerate
"""

from accounts.models.user import User  # noqa: F401
