"""
Coordinate Transform for MemorialCraft

Maps between editing-space pixels and real-world inches for one template.
Exports only ever see inches.
"""

import math
from typing import Tuple

from .catalog import Template
from .errors import InvalidGeometry
from .geometry import Rect

# Round-trip tolerance in inches
EPSILON = 1e-6


class CoordinateTransform:
    """
    Bidirectional pixel <-> inch mapping.

    scale_x = real_world_width / canvas_width
    scale_y = real_world_height / canvas_height

    The axes may scale differently. That is preserved, never corrected;
    callers that need a uniform scale must call require_uniform().
    """

    def __init__(self, real_world_width: float, real_world_height: float,
                 canvas_width: float, canvas_height: float):
        if real_world_width <= 0 or real_world_height <= 0:
            raise InvalidGeometry(
                f"Real-world size must be positive, got {real_world_width}x{real_world_height}")
        if canvas_width <= 0 or canvas_height <= 0:
            raise InvalidGeometry(
                f"Canvas size must be positive, got {canvas_width}x{canvas_height}")
        self.real_world_width = real_world_width
        self.real_world_height = real_world_height
        self.canvas_width = canvas_width
        self.canvas_height = canvas_height
        self.scale_x = real_world_width / canvas_width
        self.scale_y = real_world_height / canvas_height

    @classmethod
    def for_template(cls, template: Template) -> 'CoordinateTransform':
        return cls(template.real_world_width, template.real_world_height,
                   template.canvas_width, template.canvas_height)

    @property
    def is_uniform(self) -> bool:
        return math.isclose(self.scale_x, self.scale_y, rel_tol=1e-9, abs_tol=0.0)

    def require_uniform(self) -> None:
        """Raise InvalidGeometry if the axes scale differently."""
        if not self.is_uniform:
            raise InvalidGeometry(
                f"Non-uniform scale: {self.scale_x:.6f} in/px horizontally, "
                f"{self.scale_y:.6f} in/px vertically")

    def to_real(self, px: float, py: float) -> Tuple[float, float]:
        """Editing pixels -> inches."""
        return (px * self.scale_x, py * self.scale_y)

    def to_editing(self, rx: float, ry: float) -> Tuple[float, float]:
        """Inches -> editing pixels."""
        return (rx / self.scale_x, ry / self.scale_y)

    def length_to_real(self, pixels: float) -> float:
        """Horizontal length in pixels -> inches."""
        return pixels * self.scale_x

    def length_to_editing(self, inches: float) -> float:
        """Horizontal length in inches -> pixels."""
        return inches / self.scale_x

    def rect_to_real(self, rect: Rect) -> Rect:
        x, y = self.to_real(rect.x, rect.y)
        return Rect(x, y, rect.width * self.scale_x, rect.height * self.scale_y)

    def rect_to_editing(self, rect: Rect) -> Rect:
        x, y = self.to_editing(rect.x, rect.y)
        return Rect(x, y, rect.width / self.scale_x, rect.height / self.scale_y)

    def __repr__(self) -> str:
        return (f"CoordinateTransform(scale_x={self.scale_x!r}, "
                f"scale_y={self.scale_y!r})")
