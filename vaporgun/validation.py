"""
Input Validation
================
Boundary checks for raw user-supplied values (numbers or strings from a
form or command line).

A bad value raises ValidationError before any computation starts, so
callers can show a neutral "no result" state instead of a partial one.
Non-physical *outcomes* (e.g. a charge too weak to move the projectile)
are not validation failures; see LaunchResult.is_physical.
"""

import math
from typing import Union

Number = Union[int, float, str]

ANGLE_LIMITS_DEG = (-90.0, 90.0)
LAUNCH_HEIGHT_LIMITS_M = (0.1, 10.0)


class ValidationError(ValueError):
    """A required numeric input is missing, empty or not finite."""

    def __init__(self, field: str, value, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"{field}: {reason} (got {value!r})")


def parse_number(value: Number, field: str) -> float:
    """Convert a raw input to a finite float or raise ValidationError."""
    if value is None:
        raise ValidationError(field, value, "value is required")
    if isinstance(value, str):
        if not value.strip():
            raise ValidationError(field, value, "value is empty")
        try:
            number = float(value)
        except ValueError:
            raise ValidationError(field, value, "not a number") from None
    elif isinstance(value, bool):
        raise ValidationError(field, value, "not a number")
    else:
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ValidationError(field, value, "not a number") from None

    if not math.isfinite(number):
        raise ValidationError(field, value, "must be finite")
    return number


def require_positive(value: Number, field: str) -> float:
    """Finite, strictly positive float."""
    number = parse_number(value, field)
    if number <= 0:
        raise ValidationError(field, value, "must be positive")
    return number


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def clamp_angle(angle_deg: Number) -> float:
    """Launch angle (°) limited to [−90, 90]."""
    return clamp(parse_number(angle_deg, 'angle_deg'), *ANGLE_LIMITS_DEG)


def clamp_launch_height(height_m: Number) -> float:
    """Launch height (m) limited to [0.1, 10]."""
    return clamp(parse_number(height_m, 'launch_height_m'), *LAUNCH_HEIGHT_LIMITS_M)
