from __future__ import annotations

from typing import List

from .base import RotationStrategy


class CadenceRotationStrategy(RotationStrategy):
    """Repeat every ``cadence`` days until the end of the month.

    24h duty works one day and rests two (cadence 3); 12h duty works one day
    and rests one (cadence 2).
    """

    def __init__(self, cadence: int):
        if int(cadence) < 1:
            raise ValueError("cadence must be positive")
        self.cadence = int(cadence)

    def follow_up_days(self, *, day: int, month_length: int) -> List[int]:
        return list(range(int(day) + self.cadence, int(month_length) + 1, self.cadence))
