"""Auth Schemas — registration/login validation and the public user shape.

Invariants:
    - RegisterRequest.name: trimmed, 2-50 chars, HTML-escaped
    - email: trimmed, lower-cased, must look like local@domain.tld
    - password: >= 6 chars on register, non-empty on login; never trimmed, never echoed
    - UserPublic never carries password material

Design Decisions:
    - field_validator with explicit messages over Field(min_length=...): the
      400 response joins these messages verbatim
"""

import html
import re
from uuid import UUID

from pydantic import BaseModel, field_validator

EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 6


def normalize_email(value: str) -> str:
    value = value.strip().lower()
    if not value:
        raise ValueError("Email is required")
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Please provide a valid email")
    return value


class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str

    @field_validator("name")
    @classmethod
    def clean_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        if not NAME_MIN_LENGTH <= len(v) <= NAME_MAX_LENGTH:
            raise ValueError("Name must be 2-50 characters")
        return html.escape(v)

    @field_validator("email")
    @classmethod
    def clean_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        if not v:
            raise ValueError("Password is required")
        if len(v) < PASSWORD_MIN_LENGTH:
            raise ValueError("Password must be at least 6 characters")
        return v


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def clean_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        if not v:
            raise ValueError("Password is required")
        return v


class UserPublic(BaseModel):
    """User as returned to clients."""
    id: UUID
    name: str
    email: str

    @classmethod
    def from_user(cls, user) -> "UserPublic":
        return cls(id=user.id, name=user.name, email=user.email)
