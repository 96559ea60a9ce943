from __future__ import annotations

import logging
from typing import List, Optional

from ..common.validators import require_day
from ..core.enums import ShiftCode
from ..core.exceptions import ValidationError
from ..schedules.model import CellWrite
from .factory import RotationStrategyFactory

logger = logging.getLogger(__name__)


class RotationEngine:
    """Turns one cell edit into the full list of cells to write.

    Propagation is forward-only: editing a cell that was itself filled by an
    earlier propagation starts a new cascade from that cell and never
    revisits earlier days. When two origins reach the same cell, whichever
    edit is written last wins.
    """

    def __init__(self, factory: Optional[RotationStrategyFactory] = None):
        self._factory = factory or RotationStrategyFactory()

    def apply_shift(self, subject_id: str, day: int, code: Optional[ShiftCode], month_length: int) -> List[CellWrite]:
        if not 28 <= int(month_length) <= 31:
            raise ValidationError(f"Tamanho de mês inválido: {month_length}")
        day = require_day(day, int(month_length))
        code = ShiftCode(code) if code is not None else None

        strategy = self._factory.for_code(code)
        follow_ups = strategy.follow_up_days(day=day, month_length=int(month_length))

        writes = [CellWrite(day=day, code=code)]
        writes.extend(CellWrite(day=d, code=code) for d in follow_ups)
        if follow_ups:
            logger.debug("Shift %s on day %d for %s propagates to %s", code, day, subject_id, follow_ups)
        return writes
