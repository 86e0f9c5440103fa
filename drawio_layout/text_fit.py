"""
Text fitting for shape labels.

Estimates the box a label needs using a fixed average character width, then
grows the height for shapes whose outline leaves less room for text than
their bounding box suggests.
"""

import math
from typing import Optional

from .models import ShapeKind, TextSize

# Approximate character width in pixels (default draw.io font)
CHAR_WIDTH = 8
LINE_HEIGHT = 20
HORIZONTAL_PADDING = 20
VERTICAL_PADDING = 16
MIN_WIDTH = 80
MIN_HEIGHT = 40
DEFAULT_MAX_WIDTH = 200

# Height factor per kind: 1.0 when the whole bounding box takes text,
# larger the more area curves and angles cut away.
SHAPE_MULTIPLIERS: dict[ShapeKind, float] = {
    ShapeKind.RECTANGLE: 1.0,
    ShapeKind.STEP: 1.0,
    ShapeKind.PARALLELOGRAM: 1.0,
    ShapeKind.TRAPEZOID: 1.0,
    ShapeKind.CYLINDER: 1.15,
    ShapeKind.HEXAGON: 1.3,
    ShapeKind.TRIANGLE: 1.3,
    ShapeKind.ELLIPSE: 1.45,
    ShapeKind.CLOUD: 1.45,
    ShapeKind.RHOMBUS: 1.6,
}


def shape_multiplier(kind: "ShapeKind | str | None") -> float:
    if kind is None:
        return 1.0
    try:
        return SHAPE_MULTIPLIERS.get(ShapeKind(kind), 1.0)
    except ValueError:
        return 1.0


def split_lines(text: str) -> list[str]:
    """Split a label on real line breaks and literal backslash-n sequences."""
    normalized = (
        text.replace("\\n", "\n")
        .replace("\r\n", "\n")
        .replace("\r", "\n")
    )
    if not normalized:
        return []
    return normalized.split("\n")


def fit_text(
    text: str,
    max_width: float = DEFAULT_MAX_WIDTH,
    kind: "ShapeKind | str | None" = None,
) -> TextSize:
    """
    Calculate the size a shape needs to show its text.

    Lines wider than the wrap width count as several lines. An empty label
    gets the minimum size for every kind.

    Args:
        text: Label text; `\\n` (literal or real) starts a new line
        max_width: Width at which lines wrap
        kind: Shape kind, used to enlarge the height

    Returns:
        Recommended width and height
    """
    wrap_width = max_width - HORIZONTAL_PADDING
    longest = 0.0
    total_lines = 0

    for line in split_lines(text):
        line_width = len(line) * CHAR_WIDTH
        if wrap_width > 0 and line_width > wrap_width:
            total_lines += math.ceil(line_width / wrap_width)
            longest = max(longest, wrap_width)
        else:
            total_lines += 1
            longest = max(longest, line_width)

    width = max(MIN_WIDTH, longest + HORIZONTAL_PADDING)
    raw_height = (total_lines * LINE_HEIGHT + VERTICAL_PADDING) * shape_multiplier(kind)
    height = max(MIN_HEIGHT, math.ceil(raw_height))

    return TextSize(width=width, height=height)


def fit_to_provided(
    text: str,
    width: Optional[float] = None,
    height: Optional[float] = None,
    kind: "ShapeKind | str | None" = None,
) -> TextSize:
    """
    Fit text while honouring dimensions the caller already chose.

    Both given: used as-is. Width only: height is computed wrapping at that
    width. Height only: width is computed at the default wrap width.
    """
    if width is not None and height is not None:
        return TextSize(width=width, height=height)

    if width is not None:
        return TextSize(width=width, height=fit_text(text, width, kind).height)

    if height is not None:
        return TextSize(width=fit_text(text, kind=kind).width, height=height)

    return fit_text(text, kind=kind)


# Surface used when a new shape is authored
compute_dimensions = fit_to_provided
