"""Envelope Cipher — symmetric encryption of request/response payloads.

Invariants:
    - Ciphertext is self-contained (IV, timestamp, and MAC embedded) and URL-safe text
    - open() either returns the exact JSON value passed to seal() or raises InvalidPayloadError
    - Envelopes are opt-in: only objects with a truthy `encrypted` flag are touched
    - The cipher key is fixed at construction and never mutated

Design Decisions:
    - Fernet (cryptography) over hand-assembled AES: authenticated encryption,
      tampered ciphertext is rejected instead of decrypting to garbage
    - Fernet key derived as urlsafe_b64(SHA-256(ENCRYPTION_KEY)): operators keep
      configuring a 32-character passphrase
"""

import base64
import hashlib
import json
from typing import Any

from cryptography.fernet import Fernet, InvalidToken

from app.core.errors import InvalidPayloadError


def derive_fernet_key(secret: str) -> bytes:
    return base64.urlsafe_b64encode(hashlib.sha256(secret.encode("utf-8")).digest())


class EnvelopeCipher:
    """Encrypts and decrypts payloads under a process-wide shared key."""

    def __init__(self, secret: str):
        self._fernet = Fernet(derive_fernet_key(secret))

    def encrypt(self, plaintext: str) -> str:
        return self._fernet.encrypt(plaintext.encode("utf-8")).decode("ascii")

    def decrypt(self, ciphertext: str) -> str:
        if not isinstance(ciphertext, str) or not ciphertext:
            raise InvalidPayloadError()
        try:
            token = ciphertext.encode("ascii")
            return self._fernet.decrypt(token).decode("utf-8")
        except (InvalidToken, UnicodeError):
            raise InvalidPayloadError()

    def seal(self, value: Any) -> str:
        """Serialize a JSON value and encrypt it."""
        return self.encrypt(json.dumps(value, separators=(",", ":"), ensure_ascii=False))

    def open(self, ciphertext: Any) -> Any:
        """Decrypt and parse. Any failure is a client error."""
        plaintext = self.decrypt(ciphertext)
        try:
            return json.loads(plaintext)
        except ValueError:
            raise InvalidPayloadError()


# ─── Envelope shape ──────────────────────────────────────────────

def is_sealed_envelope(body: Any) -> bool:
    """Inbound: flagged and carrying data."""
    return isinstance(body, dict) and bool(body.get("encrypted")) and "data" in body


def wants_sealing(body: Any) -> bool:
    """Outbound: flagged and carrying a non-null data field."""
    return (
        isinstance(body, dict)
        and bool(body.get("encrypted"))
        and body.get("data") is not None
    )


def seal_body(body: dict, cipher: EnvelopeCipher) -> dict:
    """Replace `data` with its encrypted form. Returns a new dict."""
    sealed = dict(body)
    sealed["data"] = cipher.seal(body["data"])
    return sealed
