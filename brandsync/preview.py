from __future__ import annotations

import math
from dataclasses import dataclass

ZOOM_MIN = 0.15
ZOOM_MAX = 1.5
ZOOM_STEP = 0.25

# Approximate preview panel space (right panel minus padding)
DEFAULT_BUDGET_WIDTH = 700.0
DEFAULT_BUDGET_HEIGHT = 550.0

# Padding kept around the scaled document inside the scroll area
FRAME_GUTTER = 80

# Dashboard grid tile size for template thumbnails
THUMB_BUDGET_WIDTH = 320.0
THUMB_BUDGET_HEIGHT = 200.0


def _round_zoom(value: float) -> float:
    return round(value * 100) / 100


def fit_zoom(
    native_width: float,
    native_height: float,
    budget_width: float = DEFAULT_BUDGET_WIDTH,
    budget_height: float = DEFAULT_BUDGET_HEIGHT,
) -> float:
    """
    Largest zoom <= 1.0 that fits the native document inside the budget.

    The result is snapped down to a multiple of ZOOM_STEP and never drops
    below ZOOM_MIN.
    """
    if native_width <= 0 or native_height <= 0:
        raise ValueError("Native dimensions must be positive")
    fit = min(budget_width / native_width, budget_height / native_height, 1.0)
    snapped = math.floor(fit / ZOOM_STEP) * ZOOM_STEP
    return max(ZOOM_MIN, _round_zoom(snapped))


def zoom_in(zoom: float) -> float:
    return min(ZOOM_MAX, _round_zoom(zoom + ZOOM_STEP))


def zoom_out(zoom: float) -> float:
    return max(ZOOM_MIN, _round_zoom(zoom - ZOOM_STEP))


def zoom_label(zoom: float) -> str:
    return f"{round(zoom * 100)}%"


@dataclass(frozen=True)
class PreviewFrame:
    """
    On-screen geometry for a document rendered at native size and scaled.

    The document itself always lays out at native_width x native_height;
    only the wrapper takes the display size.
    """

    native_width: int
    native_height: int
    zoom: float

    @property
    def display_width(self) -> float:
        return self.native_width * self.zoom

    @property
    def display_height(self) -> float:
        return self.native_height * self.zoom

    @property
    def frame_min_width(self) -> float:
        return self.display_width + FRAME_GUTTER

    @property
    def frame_min_height(self) -> float:
        return self.display_height + FRAME_GUTTER

    @property
    def transform(self) -> str:
        return f"scale({self.zoom})"

    @property
    def label(self) -> str:
        return zoom_label(self.zoom)


def display_size(native_width: int, native_height: int, zoom: float) -> PreviewFrame:
    return PreviewFrame(native_width=native_width, native_height=native_height, zoom=zoom)


def thumbnail_frame(native_width: int, native_height: int) -> PreviewFrame:
    """Frame for a dashboard thumbnail: the full document, scaled to fit one grid tile."""
    zoom = fit_zoom(native_width, native_height, THUMB_BUDGET_WIDTH, THUMB_BUDGET_HEIGHT)
    return display_size(native_width, native_height, zoom)
