"""
MemorialCraft Design Elements

The content a customer places on a template: text runs and artwork images.
Positions and sizes are stored in real-world inches; rotation in degrees.
"""

from dataclasses import dataclass, field, replace
from typing import Union
from uuid import uuid4

from .geometry import Point, Rect


def _new_element_id() -> str:
    return uuid4().hex


@dataclass(frozen=True)
class TextElement:
    """
    A run of text bound to a typeface.

    ``x``/``y`` is the top-left of the text box; ``font_size`` is the em
    height in inches.
    """
    content: str
    font_family: str
    font_size: float
    x: float = 0.0
    y: float = 0.0
    rotation: float = 0.0
    color: str = "#000000"
    element_id: str = field(default_factory=_new_element_id)

    kind = "text"

    @property
    def position(self) -> Point:
        return Point(self.x, self.y)

    def clone(self, new_id: bool = False, **changes) -> 'TextElement':
        """
        Create a copy with some fields changed, optionally with a fresh element id.

        Elements are immutable; edits are made by cloning and handing the
        copy to DesignDocument.replace_element.
        """
        if new_id:
            changes['element_id'] = _new_element_id()
        return replace(self, **changes)


@dataclass(frozen=True)
class ArtworkElement:
    """A placed image. The exporter places the reference, it never vectorises it."""
    image_ref: str
    x: float = 0.0
    y: float = 0.0
    width: float = 1.0
    height: float = 1.0
    rotation: float = 0.0
    element_id: str = field(default_factory=_new_element_id)

    kind = "artwork"

    @property
    def position(self) -> Point:
        return Point(self.x, self.y)

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)

    def clone(self, new_id: bool = False, **changes) -> 'ArtworkElement':
        if new_id:
            changes['element_id'] = _new_element_id()
        return replace(self, **changes)


DesignElement = Union[TextElement, ArtworkElement]
