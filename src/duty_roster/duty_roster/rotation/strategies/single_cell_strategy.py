from __future__ import annotations

from typing import List

from .base import RotationStrategy


class SingleCellStrategy(RotationStrategy):
    """No recurrence: only the edited cell changes."""

    def follow_up_days(self, *, day: int, month_length: int) -> List[int]:
        return []
