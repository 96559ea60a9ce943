from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..schedules.model import ScheduleKey


@dataclass(frozen=True)
class Substitution:
    """Coverage of one assigned day by someone else (overlay, not an edit)."""

    key: ScheduleKey
    day: int
    substitute_name: str
    reason: str
    created_at: datetime
    substitute_id: Optional[str] = None
