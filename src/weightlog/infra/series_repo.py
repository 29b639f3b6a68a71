# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""SQLite persistence for the daily measurement series.

One row per calendar date. Writes go through a single
``INSERT ... ON CONFLICT(date) DO UPDATE`` so a date is never duplicated and
concurrent writers for the same date cannot interleave.
"""

from __future__ import annotations

import logging
import math
from datetime import date, datetime
from pathlib import Path
from typing import Union

from sqlalchemy import Column, Float, MetaData, String, Table, create_engine, func, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from weightlog.core.models import Measurement, Series
from weightlog.errors import DatabaseError, NotFound

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"

metadata = MetaData()

weights = Table(
    "weights",
    metadata,
    Column("date", String(10), primary_key=True),
    Column("weight", Float, nullable=False),
)


def make_engine(db_path: str) -> Engine:
    """Build the process-wide pooled engine."""
    if db_path in (":memory:", ""):
        # A single shared connection, otherwise every pooled connection sees its own empty db.
        return create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(f"sqlite:///{db_path}", connect_args={"check_same_thread": False})


def normalize_date(value: Union[date, datetime, str]) -> str:
    if isinstance(value, datetime):
        return value.date().strftime(DATE_FORMAT)
    if isinstance(value, date):
        return value.strftime(DATE_FORMAT)
    if isinstance(value, str):
        day_part = value.strip().replace("T", " ").split(" ", 1)[0]
        try:
            return datetime.strptime(day_part, DATE_FORMAT).strftime(DATE_FORMAT)
        except ValueError:
            raise ValueError(f"Not a calendar date: {value!r}") from None
    raise ValueError(f"Not a calendar date: {value!r}")


class SeriesRepository:
    def __init__(self, engine: Engine):
        self.engine = engine

    def create_schema(self) -> None:
        try:
            metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            raise DatabaseError("Schema creation failed") from e
        logger.info("Schema ready on %s", self.engine.url)

    def upsert(self, day: Union[date, datetime, str], value: float) -> Measurement:
        key = normalize_date(day)
        value = float(value)
        if not math.isfinite(value):
            raise ValueError("Measurement must be a finite number")

        stmt = sqlite_insert(weights).values(date=key, weight=value)
        stmt = stmt.on_conflict_do_update(
            index_elements=[weights.c.date],
            set_={"weight": stmt.excluded.weight},
        )
        try:
            with self.engine.begin() as conn:
                conn.execute(stmt)
        except SQLAlchemyError as e:
            raise DatabaseError("Upsert failed") from e
        return Measurement(date=key, weight=value)

    def current(self) -> Measurement:
        query = select(weights.c.date, weights.c.weight).order_by(weights.c.date.desc()).limit(1)
        try:
            with self.engine.connect() as conn:
                row = conn.execute(query).first()
        except SQLAlchemyError as e:
            raise DatabaseError("Reading current measurement failed") from e
        if row is None:
            raise NotFound()
        return Measurement(date=row.date, weight=float(row.weight))

    def all_ordered_by_date(self) -> Series:
        query = select(weights.c.date, weights.c.weight).order_by(weights.c.date.asc())
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(query).all()
        except SQLAlchemyError as e:
            raise DatabaseError("Reading series failed") from e
        return Series.from_measurements([Measurement(date=r.date, weight=float(r.weight)) for r in rows])

    def count(self) -> int:
        try:
            with self.engine.connect() as conn:
                return int(conn.execute(select(func.count()).select_from(weights)).scalar_one())
        except SQLAlchemyError as e:
            raise DatabaseError("Counting rows failed") from e
