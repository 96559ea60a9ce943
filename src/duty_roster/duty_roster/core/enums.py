from __future__ import annotations

from enum import Enum


class ShiftCode(str, Enum):
    """Shift code of one grid day (values are the stored wire format)."""

    SERVICE_DAY = "SD"
    REST_DAY = "DR"
    DUTY_12H = "12"
    DUTY_24H = "24"
    DUTY_6H = "6h"


class ScheduleCategory(str, Enum):
    """Schedule category of a grid."""

    GERAL = "Geral"
    ENFERMAGEM = "Enfermagem"
    NUTRICAO = "Nutrição"


class SubjectKind(str, Enum):
    EMPLOYEE = "employee"
    PLACEHOLDER = "placeholder"


class ReportLineKind(str, Enum):
    EMPLOYEE = "employee"
    PLACEHOLDER = "placeholder"
    FLOATER = "floater"


class ReportStatus(str, Enum):
    """Lifecycle of a monthly report sign-off (never persisted)."""

    DRAFT = "DRAFT"
    APPROVED = "APPROVED"
    EXPORTED = "EXPORTED"
