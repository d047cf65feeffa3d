from __future__ import annotations
from typing import Any, Iterable

from .errors import ValidationError


def is_blank(value: Any) -> bool:
    # only missing or empty values; whitespace is kept as sent
    return value is None or value == ""


def require_fields(data: dict, fields: Iterable[str]) -> None:
    """Raise ValidationError unless every field is present and non-empty."""
    missing = [f for f in fields if is_blank(data.get(f))]
    if missing:
        raise ValidationError(f"Todos os campos são obrigatórios: {', '.join(missing)}")


def reject_blank(changes: dict, fields: Iterable[str]) -> None:
    """Partial updates may omit a field, but may not blank it out."""
    blank = [f for f in fields if f in changes and is_blank(changes[f])]
    if blank:
        raise ValidationError(f"Campos não podem ser vazios: {', '.join(blank)}")
