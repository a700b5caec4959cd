from __future__ import annotations
import math
from dataclasses import dataclass, replace
from typing import Optional

from resizer.config import (
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    MAX_DIMENSION,
    MIN_DIMENSION,
)
from .enums import BackgroundMode, ExportFormat, FitMode


class InvalidDimension(ValueError):
    pass


def clamp_dimension(value, strict: bool = False) -> int:
    """
    Round a requested side length and clamp it to [MIN_DIMENSION, MAX_DIMENSION].
    Anything that is not a finite number maps to MIN_DIMENSION.
    With strict=True, non-finite, zero and negative input raise InvalidDimension instead.
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = math.nan
    if not math.isfinite(number):
        if strict:
            raise InvalidDimension(f"Dimension must be a finite number, got {value!r}")
        return MIN_DIMENSION
    if strict and number <= 0:
        raise InvalidDimension(f"Dimension must be positive, got {value!r}")
    # round half up like the UI spin boxes, not banker's rounding
    rounded = math.floor(number + 0.5)
    return int(min(max(rounded, MIN_DIMENSION), MAX_DIMENSION))


@dataclass(frozen=True)
class TargetSpec:
    width: Optional[float] = DEFAULT_WIDTH
    height: Optional[float] = DEFAULT_HEIGHT
    format: ExportFormat = ExportFormat.PNG
    fit_mode: FitMode = FitMode.FIT
    background_mode: BackgroundMode = BackgroundMode.TRANSPARENT
    background_color: str = DEFAULT_BACKGROUND_COLOR

    @property
    def has_dimensions(self) -> bool:
        return bool(self.width) and bool(self.height)

    def resolved(self, fallback_width: float = 0, fallback_height: float = 0) -> "TargetSpec":
        """Return a copy whose width/height are clamped; unset sides use the fallbacks."""
        width = clamp_dimension(self.width or fallback_width or MIN_DIMENSION)
        height = clamp_dimension(self.height or fallback_height or MIN_DIMENSION)
        return replace(self, width=width, height=height)

    def with_changes(self, **changes) -> "TargetSpec":
        return replace(self, **changes)
