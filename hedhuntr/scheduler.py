"""Decide which configured job sources are due to run."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable


@dataclass
class JobSource:
    """A scheduled job source and its last run time."""

    id: int = 0
    name: str = ""
    type: str = ""
    enabled: bool = False
    schedule: str = ""
    interval_seconds: int = 0
    timeout_seconds: int = 0
    last_run_at: datetime | None = None


def due_sources(sources: Iterable[JobSource], now: datetime) -> list[JobSource]:
    """Return enabled sources that never ran or whose interval has elapsed."""
    due: list[JobSource] = []
    for source in sources:
        if not source.enabled:
            continue
        if source.last_run_at is None:
            due.append(source)
            continue
        if source.interval_seconds <= 0:
            continue
        if source.last_run_at + timedelta(seconds=source.interval_seconds) <= now:
            due.append(source)
    return due