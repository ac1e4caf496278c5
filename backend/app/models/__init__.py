"""ORM Models — SQLAlchemy declarative models for users and their tasks.

Invariants:
    - All models inherit from Base (db/base.py)
    - User is the ownership root; every Task row carries user_id

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete for create_all and
      alembic autogenerate
    - No ORM relationships: every query goes through an owner-scoped repository,
      and task rows follow their owner via ON DELETE CASCADE
"""

from app.models.user import User  # noqa: F401
from app.models.task import Task  # noqa: F401
