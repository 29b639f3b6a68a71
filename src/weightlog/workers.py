# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import asyncio
import functools
import logging
from concurrent.futures import BrokenExecutor, ThreadPoolExecutor
from typing import Any, Callable

from weightlog.errors import WorkerError

logger = logging.getLogger(__name__)


class WorkerPool:
    """Bounded pool for CPU-heavy work (argon2, averaging).

    Request handlers await the returned future instead of running the work on
    the event loop or in the shared I/O threadpool.
    """

    def __init__(self, max_workers: int = 2):
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="weightlog-cpu")

    async def run(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        loop = asyncio.get_running_loop()
        call = functools.partial(fn, *args, **kwargs)
        try:
            future = loop.run_in_executor(self._executor, call)
        except (RuntimeError, BrokenExecutor) as e:
            logger.exception("Could not dispatch %s to the worker pool", getattr(fn, "__name__", fn))
            raise WorkerError("Worker dispatch failed") from e
        try:
            return await future
        except BrokenExecutor as e:
            logger.exception("Worker pool broke while running %s", getattr(fn, "__name__", fn))
            raise WorkerError("Worker task failed") from e

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)
