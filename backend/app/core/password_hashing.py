"""Password Hashing — one-way bcrypt hashing policy for stored secrets.

Invariants:
    - Plaintext passwords never leave this module in any form but a bcrypt hash
    - Default cost factor is 12 rounds
    - Comparison goes through bcrypt.checkpw, never string equality

Design Decisions:
    - bcrypt over a general-purpose hash: adaptive work factor resists offline brute force
    - verify_against_dummy() burns one compare for unknown accounts so response
      timing does not reveal whether an email is registered
"""

import bcrypt

DEFAULT_ROUNDS = 12
# bcrypt only considers the first 72 bytes of input
MAX_PASSWORD_BYTES = 72

_DUMMY_HASH = bcrypt.hashpw(b"taskvault-dummy-secret", bcrypt.gensalt(rounds=DEFAULT_ROUNDS))


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:MAX_PASSWORD_BYTES]


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash with a fresh salt. Same input never yields the same hash twice."""
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=rounds)).decode("ascii")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("ascii"))
    except ValueError:
        # malformed stored hash
        return False


def verify_against_dummy(password: str) -> bool:
    """Constant-cost compare for lookups that found no account. Always False."""
    bcrypt.checkpw(_encode(password), _DUMMY_HASH)
    return False
