# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from json import JSONDecodeError
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from weightlog.auth.session import SessionSigner, ephemeral_secret
from weightlog.auth.users import CredentialStore, UserRecord
from weightlog.config import Settings, load_settings
from weightlog.errors import MissingCredentials, TrackerError
from weightlog.infra.series_repo import SeriesRepository, make_engine
from weightlog.permissions import cookie_settings, current_identity_optional, token_from_request
from weightlog.services.tracker_service import TrackerService
from weightlog.workers import WorkerPool

logger = logging.getLogger(__name__)


class MeasurementIn(BaseModel):
    weight: float = Field(allow_inf_nan=False)


async def _credentials_payload(request: Request) -> Dict[str, Any]:
    ctype = request.headers.get("content-type", "")
    if ctype.startswith("application/json"):
        try:
            data = await request.json()
        except (JSONDecodeError, UnicodeDecodeError):
            raise MissingCredentials() from None
        return data if isinstance(data, dict) else {}
    form = await request.form()
    return {k: v for k, v in form.items() if isinstance(v, str)}


def build_service(settings: Settings) -> TrackerService:
    secret = settings.secret_key
    if not secret:
        logger.warning(
            "WEIGHTLOG_SECRET_KEY not set: using an ephemeral signing secret, "
            "sessions will not survive a restart"
        )
        secret = ephemeral_secret()

    extra: Optional[UserRecord] = None
    if settings.account_user and settings.account_password_hash:
        extra = UserRecord(username=settings.account_user, password_hash=settings.account_password_hash)

    repo = SeriesRepository(make_engine(settings.db_path))
    repo.create_schema()

    return TrackerService(
        credentials=CredentialStore(settings.users_path, extra=extra),
        signer=SessionSigner(
            secret,
            issuer=settings.issuer,
            max_age=settings.session_max_age,
            salt=settings.session_salt,
        ),
        repo=repo,
        workers=WorkerPool(settings.workers),
        window=settings.average_window,
    )


def create_app(settings: Optional[Settings] = None, service: Optional[TrackerService] = None) -> FastAPI:
    settings = settings or load_settings()
    service = service or build_service(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        service.workers.shutdown()
        service.repo.engine.dispose()

    app = FastAPI(title="weightlog", lifespan=lifespan)
    app.state.settings = settings
    app.state.service = service

    @app.exception_handler(TrackerError)
    async def _tracker_error(request: Request, exc: TrackerError):
        if exc.status_code >= 500:
            logger.error(
                "%s on %s %s",
                exc.__class__.__name__,
                request.method,
                request.url.path,
                exc_info=exc,
            )
        return JSONResponse({"detail": exc.public_message}, status_code=exc.status_code)

    @app.get("/")
    async def index(request: Request):
        return {"logged_in": current_identity_optional(request) is not None}

    @app.post("/login")
    async def login(request: Request):
        payload = await _credentials_payload(request)
        user = str(payload.get("user") or "").strip()
        secret = payload.get("secret") or payload.get("password")
        token = await service.login(user, secret if isinstance(secret, str) else None)
        resp = JSONResponse({"user": user, "token": token})
        resp.set_cookie(settings.cookie_name, token, **cookie_settings(settings))
        return resp

    @app.post("/logout")
    async def logout():
        resp = JSONResponse({"ok": True})
        resp.delete_cookie(settings.cookie_name, path="/")
        return resp

    @app.get("/api/health")
    async def health():
        return {"status": "ok"}

    @app.get("/api/current")
    async def get_current(token: Optional[str] = Depends(token_from_request)):
        m = await service.get_current(token)
        return {"weight": m.weight}

    @app.post("/api/current")
    async def post_current(data: MeasurementIn, token: Optional[str] = Depends(token_from_request)):
        m = await service.put_current(token, data.weight)
        return {"date": m.date, "weight": m.weight}

    @app.get("/api/series")
    async def get_series(token: Optional[str] = Depends(token_from_request)):
        return await service.get_series(token)

    return app


_APP: Optional[FastAPI] = None


def __getattr__(name: str):
    # `uvicorn weightlog.app:app`: built from the environment on first access only.
    global _APP
    if name == "app":
        if _APP is None:
            _APP = create_app()
        return _APP
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
