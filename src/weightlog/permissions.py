# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Optional

from fastapi import Request

from weightlog.auth.session import Identity
from weightlog.config import Settings
from weightlog.errors import TrackerError


def token_from_request(request: Request) -> Optional[str]:
    """Session token from `Authorization: Bearer` or, failing that, the cookie."""
    auth = request.headers.get("authorization", "")
    scheme, _, value = auth.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    settings: Settings = request.app.state.settings
    return request.cookies.get(settings.cookie_name) or None


def current_identity_optional(request: Request) -> Optional[Identity]:
    token = token_from_request(request)
    if not token:
        return None
    try:
        return request.app.state.service.authenticate(token)
    except TrackerError:
        return None


def cookie_settings(settings: Settings) -> dict:
    return {
        "httponly": True,
        "samesite": "strict",
        "secure": settings.cookie_secure,
        "max_age": settings.session_max_age,
        "path": "/",
    }
