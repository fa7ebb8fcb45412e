"""
Axis limits for a plot window.

Limits come either from the configured default (a symmetric window) or from
a colon-delimited string "x_min:x_max:y_min:y_max".
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from psgraph.core.errors import LimitsError

DEFAULT_LIMIT_VALUE = 10.0

LIMITS_FORMAT = "<x_min>:<x_max>:<y_min>:<y_max>"


class Limits(BaseModel):
    """The rectangular window [x_min, x_max] x [y_min, y_max]."""

    x_min: float = Field(description="Left edge of the window")
    x_max: float = Field(description="Right edge of the window")
    y_min: float = Field(description="Bottom edge of the window")
    y_max: float = Field(description="Top edge of the window")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_bounds(self) -> Limits:
        values = (self.x_min, self.x_max, self.y_min, self.y_max)
        if not all(math.isfinite(v) for v in values):
            raise ValueError("limits must be finite numbers")
        if self.x_min > self.x_max:
            raise ValueError(f"x_min ({self.x_min:g}) is greater than x_max ({self.x_max:g})")
        if self.y_min > self.y_max:
            raise ValueError(f"y_min ({self.y_min:g}) is greater than y_max ({self.y_max:g})")
        return self

    @property
    def width(self) -> float:
        return self.x_max - self.x_min

    @property
    def height(self) -> float:
        return self.y_max - self.y_min

    def __str__(self) -> str:
        return f"{self.x_min:g}:{self.x_max:g}:{self.y_min:g}:{self.y_max:g}"


def default_limits(value: float = DEFAULT_LIMIT_VALUE) -> Limits:
    """Symmetric window of ±value on both axes."""
    return make_limits(-value, value, -value, value)


def make_limits(x_min: float, x_max: float, y_min: float, y_max: float) -> Limits:
    """Build Limits, converting validation failures to LimitsError."""
    try:
        return Limits(x_min=x_min, x_max=x_max, y_min=y_min, y_max=y_max)
    except ValidationError as e:
        reasons = "; ".join(err["msg"].removeprefix("Value error, ") for err in e.errors())
        raise LimitsError(f"Invalid limits: {reasons}") from e


def parse_limits(text: str) -> Limits:
    """
    Parse "x_min:x_max:y_min:y_max" into Limits.

    Fields are read left to right; each must be a complete floating-point
    number, so anything after the fourth number is a format error.

    Raises:
        LimitsError: If the string is malformed or the bounds are inverted.
    """
    fields = text.split(":")
    if len(fields) != 4:
        raise LimitsError(
            f"Invalid limits string {text!r}: expected 4 colon-separated numbers "
            f"({LIMITS_FORMAT})"
        )

    values: list[float] = []
    for name, field in zip(("x_min", "x_max", "y_min", "y_max"), fields):
        try:
            values.append(float(field))
        except ValueError:
            raise LimitsError(
                f"Invalid limits string {text!r}: {name} is not a number ({field!r})"
            ) from None

    return make_limits(*values)
