# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

_TRUE = {"1", "true", "yes", "y"}


def _flag(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in _TRUE


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    db_path: str
    users_path: Path
    secret_key: Optional[str] = None
    session_salt: str = "weightlog.session.v1"
    session_max_age: int = 30 * 24 * 3600
    issuer: str = "weightlog"
    cookie_name: str = "token"
    cookie_secure: bool = False
    account_user: Optional[str] = None
    account_password_hash: Optional[str] = None
    workers: int = 2
    average_window: int = 7
    host: str = "0.0.0.0"
    port: int = 8989
    reload: bool = False
    log_level: str = "INFO"


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Read the WEIGHTLOG_* environment once into an immutable Settings."""
    env = os.environ if env is None else env

    data_dir = Path(env.get("WEIGHTLOG_DATA_DIR", "data")).resolve()
    db_path = env.get("WEIGHTLOG_DB_PATH") or str(data_dir / "state.db")
    users_path = Path(env.get("WEIGHTLOG_USERS_PATH") or (data_dir / "users.yml")).resolve()

    workers = int(env.get("WEIGHTLOG_WORKERS", "2"))
    if workers < 1:
        raise ValueError("WEIGHTLOG_WORKERS must be >= 1")
    window = int(env.get("WEIGHTLOG_AVERAGE_WINDOW", "7"))
    if window < 1:
        raise ValueError("WEIGHTLOG_AVERAGE_WINDOW must be >= 1")

    return Settings(
        data_dir=data_dir,
        db_path=db_path,
        users_path=users_path,
        secret_key=env.get("WEIGHTLOG_SECRET_KEY") or None,
        session_salt=env.get("WEIGHTLOG_SESSION_SALT", "weightlog.session.v1"),
        session_max_age=int(env.get("WEIGHTLOG_SESSION_MAX_AGE", str(30 * 24 * 3600))),
        issuer=env.get("WEIGHTLOG_ISSUER", "weightlog"),
        cookie_name=env.get("WEIGHTLOG_COOKIE_NAME", "token"),
        cookie_secure=_flag(env.get("WEIGHTLOG_COOKIE_SECURE")),
        account_user=(env.get("WEIGHTLOG_ACCOUNT_USER") or "").strip() or None,
        account_password_hash=(env.get("WEIGHTLOG_ACCOUNT_PASSWORD_HASH") or "").strip() or None,
        workers=workers,
        average_window=window,
        host=env.get("WEIGHTLOG_HOST", "0.0.0.0"),
        port=int(env.get("WEIGHTLOG_PORT", "8989")),
        reload=_flag(env.get("WEIGHTLOG_RELOAD")),
        log_level=env.get("WEIGHTLOG_LOG_LEVEL", "INFO").upper(),
    )
