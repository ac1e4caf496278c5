"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId and TaskId wrap UUIDs — never use bare UUID in domain logic
    - All valid task states encoded as an Enum — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enum: serializes to JSON without custom encoders, matches the wire values
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
TaskId = NewType("TaskId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class TaskStatus(str, Enum):
    """Task lifecycle states, stored in the `status` column."""
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"

    @classmethod
    def values(cls) -> list[str]:
        return [s.value for s in cls]


class Environment(str, Enum):
    """Deployment topology. Drives cookie Secure/SameSite attributes."""
    DEVELOPMENT = "development"
    PRODUCTION = "production"
