# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple

import yaml

from weightlog.auth.passwords import DUMMY_HASH, verify_password

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserRecord:
    username: str
    password_hash: str


def load_users_file(path: Path) -> Dict[str, UserRecord]:
    if not path.exists():
        return {}
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    users = (raw.get("users") or {}) if isinstance(raw, dict) else {}
    out: Dict[str, UserRecord] = {}
    for uname, udata in users.items():
        if not isinstance(udata, dict):
            continue
        username = str(uname).strip()
        if not username:
            continue
        ph = str(udata.get("password_hash") or "").strip()
        out[username] = UserRecord(username=username, password_hash=ph)
    return out


def save_user(path: Path, username: str, password_hash: str) -> None:
    """Insert or replace one credential record in the users file.

    Provisioning is an administrative step (scripts/create_user.py); no HTTP
    endpoint reaches this.
    """
    username = (username or "").strip()
    if not username:
        raise ValueError("Empty username")
    if not password_hash:
        raise ValueError("Empty password hash")

    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists():
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    else:
        raw = {"version": 1, "users": {}}
    if "users" not in raw or not isinstance(raw["users"], dict):
        raw["users"] = {}

    raw["users"][username] = {"password_hash": password_hash}
    path.write_text(yaml.safe_dump(raw, sort_keys=False, allow_unicode=True), encoding="utf-8")


class CredentialStore:
    """One argon2 hash per known identifier.

    Records come from the users file, reloaded whenever its mtime changes, plus
    an optional fixed account configured through the environment.
    """

    def __init__(self, path: Path, extra: Optional[UserRecord] = None):
        self.path = path
        self._extra = extra
        self._lock = threading.Lock()
        self._cache: Tuple[float, Dict[str, UserRecord]] = (0.0, {})

    def _users(self) -> Dict[str, UserRecord]:
        try:
            mtime = self.path.stat().st_mtime if self.path.exists() else 0.0
        except OSError:
            mtime = 0.0
        with self._lock:
            cached_mtime, cached_users = self._cache
            if mtime and mtime == cached_mtime:
                users = cached_users
            else:
                users = load_users_file(self.path)
                self._cache = (mtime, users)
        if self._extra is not None:
            users = {**users, self._extra.username: self._extra}
        return users

    def get(self, identifier: str) -> Optional[UserRecord]:
        u = (identifier or "").strip()
        if not u:
            return None
        return self._users().get(u)

    def add(self, identifier: str, password_hash: str) -> None:
        """Persist one record and drop the cache so the next lookup sees it."""
        save_user(self.path, identifier, password_hash)
        with self._lock:
            self._cache = (0.0, {})

    def verify(self, identifier: str, secret: str) -> bool:
        """True only for a known identifier whose hash matches secret.

        Unknown identifiers still pay for one verification against a dummy
        hash, so timing does not tell them apart from a wrong secret.
        """
        record = self.get(identifier)
        if record is None or not record.password_hash:
            verify_password(DUMMY_HASH, secret or "-")
            return False
        return verify_password(record.password_hash, secret)
