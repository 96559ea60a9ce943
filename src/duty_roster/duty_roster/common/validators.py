from __future__ import annotations

from ..core.exceptions import ConfirmationRequiredError, ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} não pode ficar em branco")
    return value.strip()


def require_min_value(value: int, field_name: str, min_value: int) -> int:
    if value is None or int(value) < min_value:
        raise ValidationError(f"{field_name} deve ser no mínimo {min_value}")
    return int(value)


def require_month(month: int) -> int:
    if not 1 <= int(month) <= 12:
        raise ValidationError(f"Mês inválido: {month}")
    return int(month)


def require_day(day: int, days_in_month: int) -> int:
    if not 1 <= int(day) <= days_in_month:
        raise ValidationError(f"Dia {day} fora do mês (1-{days_in_month})")
    return int(day)


def require_confirmation(confirm: bool, action: str) -> None:
    if not confirm:
        raise ConfirmationRequiredError(f"Confirme a ação antes de continuar: {action}")
