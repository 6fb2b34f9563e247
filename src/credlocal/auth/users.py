# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple

import yaml

from credlocal.auth.passwords import check_password, hash_password

# Anchored to the project root, not the current working directory.
BASE_DIR = Path(__file__).resolve().parents[3]
DEFAULT_USERS_PATH = Path(
    os.getenv("CREDLOCAL_USERS_PATH", str(BASE_DIR / "data" / "users.yml"))
).resolve()


@dataclass(frozen=True)
class UserRecord:
    username: str
    active: bool
    password_hash: str


def _parse_users(raw) -> Dict[str, UserRecord]:
    users = (raw.get("users") or {}) if isinstance(raw, dict) else {}
    out: Dict[str, UserRecord] = {}
    for uname, udata in users.items():
        if not isinstance(udata, dict):
            continue
        username = str(uname).strip()
        if not username:
            continue
        out[username] = UserRecord(
            username=username,
            active=bool(udata.get("active", True)),
            password_hash=str(udata.get("password_hash") or "").strip(),
        )
    return out


class UserTable:
    """users.yml backed user table.

    The file is re-read only when its mtime changes. Each table keeps its own
    cache so several apps (or tests) can point at different files.
    """

    def __init__(self, path: Path = DEFAULT_USERS_PATH) -> None:
        self.path = Path(path)
        self._cache: Tuple[float, Dict[str, UserRecord]] = (0.0, {})

    def users(self) -> Dict[str, UserRecord]:
        try:
            mtime = self.path.stat().st_mtime
        except OSError:
            return {}

        cached_mtime, cached_users = self._cache
        if mtime == cached_mtime and cached_users:
            return cached_users

        raw = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
        users = _parse_users(raw)
        self._cache = (mtime, users)
        return users

    def get_user(self, username: str) -> Optional[UserRecord]:
        u = (username or "").strip()
        if not u:
            return None
        return self.users().get(u)

    def authenticate(self, username: str, password: str) -> Optional[UserRecord]:
        u = self.get_user(username)
        if not u or not u.active:
            return None
        if not check_password(u.password_hash, password):
            return None
        return u

    def put_user(self, username: str, password: str, *, active: bool = True) -> UserRecord:
        """Create or replace a user, hashing the password. Returns the stored record."""
        u = (username or "").strip()
        if not u:
            raise ValueError("Empty username")

        if self.path.exists():
            raw = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
        else:
            raw = {"version": 1, "users": {}}
        if not isinstance(raw.get("users"), dict):
            raw["users"] = {}

        record = UserRecord(username=u, active=active, password_hash=hash_password(password))
        raw["users"][u] = {"active": record.active, "password_hash": record.password_hash}

        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(yaml.safe_dump(raw, sort_keys=False, allow_unicode=True), encoding="utf-8")
        self._cache = (0.0, {})
        return record
