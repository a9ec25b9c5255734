from datetime import date
from typing import Any


class ValidationError(ValueError):
    def __init__(self, message: str, fields: list[str] | None = None):
        self.fields = fields or []
        super().__init__(message)


def require_fields(**values: Any) -> None:
    missing = [
        name
        for name, value in values.items()
        if value is None or (isinstance(value, str) and not value.strip())
    ]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}", missing)


def require_iso_date(name: str, value: str) -> None:
    try:
        date.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an ISO date (YYYY-MM-DD): {value!r}", [name])
