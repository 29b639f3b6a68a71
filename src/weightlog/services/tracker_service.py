# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Session-gated access to the measurement series.

Every data operation verifies the session token first; when that fails the
verifier's error is raised and the store is never touched. Store I/O runs in
the Starlette threadpool, argon2 and averaging run on the CPU worker pool.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, Optional

from starlette.concurrency import run_in_threadpool

from weightlog.auth.session import Identity, SessionSigner
from weightlog.auth.users import CredentialStore
from weightlog.core.models import Measurement
from weightlog.errors import MissingCredentials, WrongCredentials
from weightlog.infra.series_repo import SeriesRepository
from weightlog.services.smoothing import DEFAULT_WINDOW, raw_and_average
from weightlog.workers import WorkerPool

logger = logging.getLogger(__name__)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


class TrackerService:
    def __init__(
        self,
        *,
        credentials: CredentialStore,
        signer: SessionSigner,
        repo: SeriesRepository,
        workers: WorkerPool,
        window: int = DEFAULT_WINDOW,
        today: Callable[[], date] = utc_today,
    ):
        self.credentials = credentials
        self.signer = signer
        self.repo = repo
        self.workers = workers
        self.window = window
        self._today = today

    async def login(self, user: Optional[str], secret: Optional[str]) -> str:
        user = (user or "").strip()
        if not user or not secret:
            raise MissingCredentials()
        ok = await self.workers.run(self.credentials.verify, user, secret)
        if not ok:
            logger.info("Failed login for %r", user)
            raise WrongCredentials()
        logger.info("Login for %r", user)
        return self.signer.issue(user)

    def authenticate(self, token: Optional[str]) -> Identity:
        return self.signer.verify(token)

    async def get_current(self, token: Optional[str]) -> Measurement:
        self.authenticate(token)
        return await run_in_threadpool(self.repo.current)

    async def put_current(self, token: Optional[str], value: float) -> Measurement:
        identity = self.authenticate(token)
        m = await run_in_threadpool(self.repo.upsert, self._today(), value)
        logger.info("Stored %s=%s for %r", m.date, m.weight, identity.username)
        return m

    async def get_series(self, token: Optional[str]) -> Dict[str, Any]:
        self.authenticate(token)
        raw = await run_in_threadpool(self.repo.all_ordered_by_date)
        return await self.workers.run(raw_and_average, raw, self.window)
