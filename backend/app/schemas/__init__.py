"""Pydantic Schemas — request validation and response shapes for API endpoints.

Invariants:
    - Schemas validate at the system boundary, after envelope decryption
    - Domain types from core/ used for enum fields

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence (ADR: DDD boundary)
"""
