from __future__ import annotations

from typing import Any, Optional

from ..core.exceptions import ValidationError


def require_int(value: Any, field_name: str) -> int:
    if value is None or isinstance(value, bool) or str(value).strip() == "":
        raise ValidationError(f"{field_name} is required")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def optional_int(value: Any, field_name: str) -> Optional[int]:
    if value is None or str(value).strip() == "":
        return None
    return require_int(value, field_name)


def parse_id_list(value: Optional[str], field_name: str) -> list[int]:
    """Parse a comma separated id list such as '1,2,3'."""

    parts = [p.strip() for p in (value or "").split(",") if p.strip()]
    return [require_int(p, field_name) for p in parts]
