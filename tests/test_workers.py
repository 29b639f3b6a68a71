import asyncio
import threading

import pytest

from weightlog.errors import NotFound, WorkerError
from weightlog.workers import WorkerPool


def test_runs_off_the_calling_thread():
    pool = WorkerPool(1)
    caller = threading.get_ident()
    try:
        ident = asyncio.run(pool.run(threading.get_ident))
    finally:
        pool.shutdown()
    assert ident != caller


def test_passes_arguments_and_returns_result():
    pool = WorkerPool(2)
    try:
        assert asyncio.run(pool.run(divmod, 7, 2)) == (3, 1)
    finally:
        pool.shutdown()


def test_domain_errors_propagate_unchanged():
    def boom():
        raise NotFound()

    pool = WorkerPool(1)
    try:
        with pytest.raises(NotFound):
            asyncio.run(pool.run(boom))
    finally:
        pool.shutdown()


def test_dispatch_after_shutdown_is_worker_error():
    pool = WorkerPool(1)
    pool.shutdown()
    with pytest.raises(WorkerError):
        asyncio.run(pool.run(int, "1"))
