"""
MemorialCraft Geometry Primitives

Points, rectangles and bounding boxes in real-world inches.
The origin is the top-left corner of the template with y growing downward,
matching the editing canvas.
"""

from dataclasses import dataclass
from typing import List
import math


@dataclass
class Point:
    """A 2D point."""
    x: float
    y: float

    def rotate(self, degrees: float, center: 'Point' = None) -> 'Point':
        """Rotate point around center by an angle in degrees (clockwise on a y-down canvas)."""
        if center is None:
            center = Point(0, 0)
        angle = math.radians(degrees)
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        dx = self.x - center.x
        dy = self.y - center.y
        return Point(
            center.x + dx * cos_a - dy * sin_a,
            center.y + dx * sin_a + dy * cos_a
        )

    def rounded(self, precision: int) -> 'Point':
        return Point(round(self.x, precision), round(self.y, precision))


@dataclass
class BoundingBox:
    """Axis-aligned bounding box."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @classmethod
    def from_points(cls, points: List[Point]) -> 'BoundingBox':
        if not points:
            return cls(0, 0, 0, 0)
        return cls(
            min_x=min(p.x for p in points),
            min_y=min(p.y for p in points),
            max_x=max(p.x for p in points),
            max_y=max(p.y for p in points)
        )


@dataclass(frozen=True)
class Rect:
    """A rectangle given by its top-left corner and size, in inches."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def corners(self) -> List[Point]:
        """Closed outline, clockwise from the top-left corner."""
        return [
            Point(self.x, self.y),
            Point(self.right, self.y),
            Point(self.right, self.bottom),
            Point(self.x, self.bottom),
            Point(self.x, self.y)
        ]

    def bounding_box(self) -> BoundingBox:
        return BoundingBox(self.x, self.y, self.right, self.bottom)

    def is_within(self, width: float, height: float, tolerance: float = 1e-9) -> bool:
        """Check that the rectangle has a non-negative size and fits in [0, width] x [0, height]."""
        return (self.width >= 0 and self.height >= 0 and
                self.x >= -tolerance and self.y >= -tolerance and
                self.right <= width + tolerance and
                self.bottom <= height + tolerance)

    @classmethod
    def from_dict(cls, data: dict) -> 'Rect':
        return cls(
            x=float(data.get('x', 0.0)),
            y=float(data.get('y', 0.0)),
            width=float(data.get('width', 0.0)),
            height=float(data.get('height', 0.0))
        )

    def to_dict(self) -> dict:
        return {'x': self.x, 'y': self.y, 'width': self.width, 'height': self.height}


def rotate_paths(paths: List[List[Point]], degrees: float,
                 origin: Point) -> List[List[Point]]:
    """Rotate every point of every path around origin."""
    if degrees == 0:
        return [[Point(p.x, p.y) for p in path] for path in paths]
    return [[p.rotate(degrees, origin) for p in path] for path in paths]
