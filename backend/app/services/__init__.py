"""Services Layer — credential lifecycle and owner-scoped task use cases.

Invariants:
    - Services receive repositories by injection and never build HTTP responses
    - Errors are raised as core/errors.py types; routes never catch them

Design Decisions:
    - One service per aggregate (users, tasks) for locality
"""
