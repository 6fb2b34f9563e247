# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

_HASHER = PasswordHasher()


def hash_password(plain: str) -> str:
    if not plain:
        raise ValueError("Empty password")
    return _HASHER.hash(plain)


def check_password(stored_hash: str, plain: str) -> bool:
    """True when `plain` matches `stored_hash`. Malformed hashes never match."""
    if not stored_hash or not plain:
        return False
    try:
        return _HASHER.verify(stored_hash, plain)
    except (VerificationError, InvalidHashError):
        return False
