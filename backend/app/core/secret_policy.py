"""Secret Policy — detects empty or well-known placeholder keys at startup.

Invariants:
    - Pure: returns warnings, never raises and never logs key material
    - Placeholder lists include the shipped defaults from config.py

Design Decisions:
    - Warn, don't fail: the service stays available while operators rotate keys
"""

WEAK_JWT_SECRETS = frozenset({
    "your_super_secret_jwt_key_here",
    "rahulrao1234_supersecret",
    "changeme",
    "secret",
})

WEAK_ENCRYPTION_KEYS = frozenset({
    "your_32_character_encryption_key_",
    "changethis32charkey1234567890123",
    "default_32_char_key_replace_this!",
})

# HS256 keys shorter than the digest size weaken the signature
MIN_JWT_SECRET_BYTES = 32


def is_weak_jwt_secret(secret: str | None) -> bool:
    if not secret or secret in WEAK_JWT_SECRETS:
        return True
    return len(secret.encode("utf-8")) < MIN_JWT_SECRET_BYTES


def is_weak_encryption_key(key: str | None) -> bool:
    return not key or key in WEAK_ENCRYPTION_KEYS


def find_weak_secrets(jwt_secret: str | None, encryption_key: str | None) -> list[str]:
    """Human-readable warnings for every weak key."""
    warnings = []
    if is_weak_jwt_secret(jwt_secret):
        warnings.append("JWT_SECRET is using a default/weak value.")
    if is_weak_encryption_key(encryption_key):
        warnings.append("ENCRYPTION_KEY is using a default/weak value.")
    return warnings
