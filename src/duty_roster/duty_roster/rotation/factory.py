from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from ..core.constants import ROTATION_CADENCE_DAYS
from ..core.enums import ShiftCode
from .strategies.base import RotationStrategy
from .strategies.cadence_strategy import CadenceRotationStrategy
from .strategies.single_cell_strategy import SingleCellStrategy


@dataclass
class RotationStrategyFactory:
    """Factory Pattern: choose the recurrence rule for a shift code."""

    cadences: Dict[ShiftCode, int] = field(default_factory=lambda: dict(ROTATION_CADENCE_DAYS))

    def for_code(self, code: Optional[ShiftCode]) -> RotationStrategy:
        if code is None:
            return SingleCellStrategy()

        cadence = self.cadences.get(ShiftCode(code))
        if cadence:
            return CadenceRotationStrategy(cadence)
        return SingleCellStrategy()
