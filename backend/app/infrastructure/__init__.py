"""Infrastructure Layer — database access, repositories, rate limiting, logging.

Invariants:
    - Infrastructure never imports from api/ or services/
    - Store faults are translated to core/errors.py types before leaving this layer

Design Decisions:
    - Repositories are thin SQLAlchemy wrappers satisfying core/repository_protocols.py
"""
