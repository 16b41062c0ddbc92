"""
Transaction records and identifier generation.

A transaction is an identifier callers obtain from the Logger and pass
alongside log calls to correlate a sequence of records. The Logger's table
holds only active transactions; ending one removes it.
"""

from __future__ import annotations

import secrets
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


@dataclass
class Transaction:
    id: str
    started_at: datetime
    ended_at: Optional[datetime] = None

    @property
    def duration_seconds(self) -> float | None:
        """Elapsed time between start and end, None while active."""
        if self.ended_at is None:
            return None
        return (self.ended_at - self.started_at).total_seconds()


def generate_transaction_id() -> str:
    """
    Return a new transaction identifier.

    Normally 128 random bits rendered as 32 lowercase hex characters. If the
    OS random source fails, falls back to the current time in nanoseconds as
    a decimal string. That fallback is best-effort: two ids produced in the
    same clock tick can collide.
    """
    try:
        return secrets.token_hex(16)
    except OSError:
        return str(time.time_ns())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
