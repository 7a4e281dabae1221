"""
MemorialCraft Vector Document

In-memory cut/engrave document: named layers of entities in real-world
inches. Writers (DXF, SVG) serialise it; they never see editing pixels.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from ..core.geometry import BoundingBox, Point, Rect, rotate_paths

OUTLINE_LAYER = "outline"
TEXT_LAYER = "text"
ARTWORK_LAYER = "artwork"
LAYER_ORDER = (OUTLINE_LAYER, TEXT_LAYER, ARTWORK_LAYER)


@dataclass
class OutlineEntity:
    """A closed template boundary (edit zone or base region)."""
    name: str
    kind: str               # "edit_zone" or "base_region"
    rect: Rect

    def world_paths(self) -> List[List[Point]]:
        return [self.rect.corners()]


@dataclass
class TextEntity:
    """
    One glyph run.

    ``glyph_paths`` are relative to ``insert`` (the top-left of the text
    box) and unrotated; ``rotation`` is in degrees around ``insert``.
    """
    name: str
    content: str
    font_family: str
    height: float
    insert: Point
    rotation: float = 0.0
    sequence: int = 0
    glyph_paths: List[List[Point]] = field(default_factory=list)

    def world_paths(self) -> List[List[Point]]:
        moved = [[Point(p.x + self.insert.x, p.y + self.insert.y) for p in path]
                 for path in self.glyph_paths]
        return rotate_paths(moved, self.rotation, self.insert)


@dataclass
class ArtworkEntity:
    """Placement of a referenced image; the image itself is not vectorised."""
    name: str
    image_ref: str
    rect: Rect
    rotation: float = 0.0
    sequence: int = 0

    @property
    def insert(self) -> Point:
        return Point(self.rect.x, self.rect.y)

    def world_paths(self) -> List[List[Point]]:
        return rotate_paths([self.rect.corners()], self.rotation, self.insert)


VectorEntity = Union[OutlineEntity, TextEntity, ArtworkEntity]


@dataclass
class VectorLayer:
    """A named layer holding entities in emission order."""
    name: str
    color: str = "#000000"
    entities: List[VectorEntity] = field(default_factory=list)

    def add_entity(self, entity: VectorEntity) -> None:
        self.entities.append(entity)

    def __len__(self) -> int:
        return len(self.entities)


# Display colours per layer; DXF uses the matching ACI index
LAYER_COLORS = {
    OUTLINE_LAYER: "#0000FF",
    TEXT_LAYER: "#000000",
    ARTWORK_LAYER: "#FF0000",
}


@dataclass
class VectorDocument:
    """
    The root vector document.

    Always carries the three layers outline, text and artwork, in that order,
    even when some of them are empty.
    """
    name: str
    width: float              # inches
    height: float             # inches
    layers: List[VectorLayer] = field(default_factory=list)

    def __post_init__(self):
        if not self.layers:
            self.layers = [VectorLayer(name, LAYER_COLORS[name]) for name in LAYER_ORDER]

    def get_layer(self, name: str) -> Optional[VectorLayer]:
        """Find a layer by name."""
        for layer in self.layers:
            if layer.name == name:
                return layer
        return None

    @property
    def outline(self) -> VectorLayer:
        return self.get_layer(OUTLINE_LAYER)

    @property
    def text(self) -> VectorLayer:
        return self.get_layer(TEXT_LAYER)

    @property
    def artwork(self) -> VectorLayer:
        return self.get_layer(ARTWORK_LAYER)

    def content_entities(self) -> List[VectorEntity]:
        """Text and artwork entities in element-sequence order."""
        entities = list(self.text.entities) + list(self.artwork.entities)
        return sorted(entities, key=lambda e: e.sequence)

    def get_design_bounds(self) -> Optional[BoundingBox]:
        """Bounding box of every entity on every layer, or None if empty."""
        points = [p for layer in self.layers for entity in layer.entities
                  for path in entity.world_paths() for p in path]
        if not points:
            return None
        return BoundingBox.from_points(points)
