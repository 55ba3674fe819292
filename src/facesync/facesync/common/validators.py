from __future__ import annotations

import math
from typing import Any, Sequence

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} không hợp lệ")
    return str(value).strip()


def require_landmarks(value: Any, field_name: str = "landmarks") -> list[float]:
    """Coerce a JSON-ish landmark payload into a flat list of finite floats."""

    if value is None or isinstance(value, (str, bytes, dict)):
        raise ValidationError(f"{field_name} phải là một dãy số")
    try:
        items = [float(v) for v in value]
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} phải là một dãy số")
    if not items:
        raise ValidationError(f"{field_name} không được để trống")
    if not all(math.isfinite(v) for v in items):
        raise ValidationError(f"{field_name} chứa giá trị không hợp lệ")
    return items


def require_dimension(vector: Sequence[float], expected: int | None, field_name: str = "landmarks") -> None:
    if expected is not None and len(vector) != expected:
        raise ValidationError(f"{field_name} phải có đúng {expected} giá trị (nhận được {len(vector)})")


def require_positive_int(value: Any, field_name: str, *, maximum: int | None = None) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} không hợp lệ")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} không hợp lệ")
    if number < 1 or (maximum is not None and number > maximum):
        bound = f"1..{maximum}" if maximum is not None else ">= 1"
        raise ValidationError(f"{field_name} phải nằm trong khoảng {bound}")
    return number
