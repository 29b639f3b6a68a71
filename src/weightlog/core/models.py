# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class Measurement:
    date: str  # YYYY-MM-DD
    weight: float


@dataclass
class Series:
    """Parallel date/value lists, ascending by date."""

    dates: List[str] = field(default_factory=list)
    weights: List[float] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.dates)

    @classmethod
    def from_measurements(cls, rows: List[Measurement]) -> "Series":
        return cls(dates=[m.date for m in rows], weights=[float(m.weight) for m in rows])

    def to_dict(self) -> Dict[str, Any]:
        return {"dates": list(self.dates), "weights": list(self.weights)}
