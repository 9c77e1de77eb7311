#!/usr/bin/env python3
"""
Viewport camera: maps world meters to screen pixels and back.
"""
from typing import Sequence, Tuple

from .bodies import Rectangle
from .constants import (
    DEFAULT_METERS_PER_PIXEL,
    MAX_METERS_PER_PIXEL,
    MIN_METERS_PER_PIXEL,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from .vector import Vector2D, clamp


class Camera2D:
    """
    Camera centered on a world point with a uniform scale (meters per pixel).
    Screen y grows downwards like world y, so no axis flip is applied.
    """

    def __init__(self, center: Vector2D = Vector2D.zero(), meters_per_pixel=DEFAULT_METERS_PER_PIXEL):
        self.center = center
        self.mpp = meters_per_pixel
        self.viewport_size = (VIEW_WIDTH, VIEW_HEIGHT)

    def set_viewport_size(self, w: int, h: int) -> None:
        self.viewport_size = (w, h)

    @property
    def _half_viewport(self) -> Vector2D:
        return Vector2D(self.viewport_size[0] / 2, self.viewport_size[1] / 2)

    def world_to_screen(self, pos: Vector2D) -> Tuple[float, float]:
        screen = pos.subtract(self.center).mul(1.0 / self.mpp).add(self._half_viewport)
        return (screen.x, screen.y)

    def screen_to_world(self, screen: Sequence[float]) -> Vector2D:
        offset = Vector2D(screen[0], screen[1]).subtract(self._half_viewport)
        return self.center.add(offset.mul(self.mpp))

    def zoom(self, factor: float, pivot_screen=None) -> None:
        """Zoom in by ``factor`` (> 1 zooms in), keeping ``pivot_screen`` fixed on screen."""
        pivot = self.screen_to_world(pivot_screen) if pivot_screen is not None else None
        self.mpp = clamp(self.mpp / clamp(factor, 0.05, 20.0), MIN_METERS_PER_PIXEL, MAX_METERS_PER_PIXEL)
        if pivot is not None:
            self.center = self.center.add(pivot.subtract(self.screen_to_world(pivot_screen)))

    def pan_pixels(self, dx_pixels: float, dy_pixels: float) -> None:
        self.center = self.center.subtract(Vector2D(dx_pixels, dy_pixels).mul(self.mpp))

    def fit(self, rect: Rectangle, margin: float = 1.2) -> None:
        """Center on ``rect`` and zoom so that it fills the viewport with a margin."""
        w, h = self.viewport_size
        width_m = max(rect.width * margin, MIN_METERS_PER_PIXEL)
        height_m = max(rect.height * margin, MIN_METERS_PER_PIXEL)
        self.center = rect.center
        self.mpp = clamp(max(width_m / max(w, 1), height_m / max(h, 1)),
                         MIN_METERS_PER_PIXEL, MAX_METERS_PER_PIXEL)
