from __future__ import annotations

import secrets
import string

from argon2 import PasswordHasher
from argon2.exceptions import HashingError, VerificationError, VerifyMismatchError

from eventhall.core.config import settings

_hasher = PasswordHasher()

_ALPHABET = string.ascii_letters + string.digits


def hash_password(plain: str) -> str:
    if not plain:
        raise ValueError("password is required")
    try:
        return _hasher.hash(plain)
    except HashingError as exc:
        raise ValueError("failed to hash password") from exc


def verify_password(plain: str, hashed: str | None) -> bool:
    if not plain or not hashed:
        return False
    try:
        return _hasher.verify(hashed, plain)
    except (VerifyMismatchError, VerificationError):
        return False


def generate_password(length: int | None = None) -> str:
    size = max(length or settings.generated_password_length, 8)
    return "".join(secrets.choice(_ALPHABET) for _ in range(size))
