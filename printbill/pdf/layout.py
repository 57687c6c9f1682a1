"""Fixed invoice geometry, in millimetres on an A4 portrait page."""

from __future__ import annotations

PAGE_CENTER_X = 105
LEFT_X = 20
META_X = 140

LOGO_X = 140
LOGO_Y = 55
LOGO_MAX_W = 50
LOGO_MAX_H = 30

TABLE_Y = 80
TABLE_W = 170
TABLE_HEADER_H = 10
COLUMN_X = {"item": 25, "quantity": 90, "price": 120, "total": 160}
HEADER_BASELINE_Y = 86
ROW_BASELINE_Y = 96

RULE_Y = 105
TOTAL_LABEL_X = 130
TOTAL_Y = 115
FOOTER_Y = 280


def fit_within(width: float, height: float, max_width: float, max_height: float) -> tuple[float, float]:
    """Scale (width, height) uniformly so it fits the box without distortion.

    The scale factor is ``min(max_width / width, max_height / height)`` and is
    applied even when it enlarges a small image.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    scale = min(max_width / width, max_height / height)
    return width * scale, height * scale
