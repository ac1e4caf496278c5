"""Core Layer — pure domain logic: tokens, hashing, envelope cipher, pagination.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - No IO: functions are deterministic given their injected keys and clock

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
"""
