from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List


class RotationStrategy(ABC):
    """Strategy Pattern: which later days a shift code repeats on."""

    @abstractmethod
    def follow_up_days(self, *, day: int, month_length: int) -> List[int]:
        """Days after ``day`` (never beyond ``month_length``) that receive the same code."""

        raise NotImplementedError
