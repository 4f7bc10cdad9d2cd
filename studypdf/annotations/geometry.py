"""Mapping between screen-pixel rectangles and stable page coordinates.

A rectangle captured on screen is only meaningful at the render scale it
was drawn with. Stored highlights are divided back to scale 1.0 so they
stay put across zoom changes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

MIN_SELECTION_SIZE = 5.0


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "x": float(self.x),
            "y": float(self.y),
            "width": float(self.width),
            "height": float(self.height),
        }


def _check_scale(scale: float) -> float:
    scale = float(scale)
    if not scale > 0:
        raise ValueError(f"Render scale must be positive, got {scale!r}")
    return scale


def to_stable(rect: Rect, scale: float) -> Rect:
    scale = _check_scale(scale)
    return Rect(
        rect.x / scale,
        rect.y / scale,
        rect.width / scale,
        rect.height / scale,
    )


def to_screen(rect: Rect, scale: float) -> Rect:
    scale = _check_scale(scale)
    return Rect(
        rect.x * scale,
        rect.y * scale,
        rect.width * scale,
        rect.height * scale,
    )


def normalized_rect(ax: float, ay: float, bx: float, by: float) -> Rect:
    """Box spanning two corner points, with a top-left origin and positive size."""
    return Rect(min(ax, bx), min(ay, by), abs(bx - ax), abs(by - ay))


def meets_minimum(rect: Rect, minimum: float = MIN_SELECTION_SIZE) -> bool:
    return rect.width >= minimum and rect.height >= minimum
