"""
MemorialCraft Catalogs

Read-only records for product templates, typefaces and materials, and the
repositories that look them up. Repositories are plain objects handed to
the exporters; nothing here is module-level state.

Records accept both the snake_case field names used in Python and the
camelCase keys of the stored product data (``realWorldWidth``, ``fileName``...).
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Generic, Iterable, List, Optional, Tuple, TypeVar

from .errors import InvalidGeometry, InvalidReference
from .geometry import Rect

logger = logging.getLogger(__name__)


def _pick(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first key present in data."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass(frozen=True)
class EditZone:
    """A rectangle in which user content may be placed."""
    id: str
    rect: Rect

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EditZone':
        return cls(id=str(data.get('id', '')), rect=Rect.from_dict(data))


@dataclass(frozen=True)
class DecorativeSlot:
    """A template-fixed placeholder for ornamental artwork."""
    id: str
    image_ref: str
    rect: Rect

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DecorativeSlot':
        return cls(
            id=str(data.get('id', '')),
            image_ref=str(_pick(data, 'image_ref', 'imageUrl', 'image', default='')),
            rect=Rect.from_dict(data)
        )


@dataclass(frozen=True)
class BaseRegion:
    """The material base band of a product."""
    rect: Rect
    material_id: str
    id: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BaseRegion':
        return cls(
            id=str(data.get('id', '')),
            rect=Rect.from_dict(data),
            material_id=str(_pick(data, 'material_id', 'materialId', 'material', default=''))
        )


@dataclass(frozen=True)
class Template:
    """
    Physical product geometry.

    Real-world sizes are in inches, canvas sizes in editing-space pixels.
    The two scales need not agree; a non-uniform template is kept as-is.
    """
    id: str
    name: str
    category: str
    real_world_width: float
    real_world_height: float
    canvas_width: float
    canvas_height: float
    edit_zones: Tuple[EditZone, ...] = ()
    decorative_slots: Tuple[DecorativeSlot, ...] = ()
    base_regions: Tuple[BaseRegion, ...] = ()
    available_materials: Tuple[str, ...] = ()
    default_material_id: str = ""

    def validate(self) -> None:
        """
        Raise if the template can't describe a real product.

        Raises:
            InvalidGeometry: non-positive sizes or out-of-bounds rectangles
            InvalidReference: the default material isn't a permitted one
        """
        if self.real_world_width <= 0 or self.real_world_height <= 0:
            raise InvalidGeometry(
                f"Template {self.id!r} has non-positive real-world size "
                f"{self.real_world_width}x{self.real_world_height}")
        if self.canvas_width <= 0 or self.canvas_height <= 0:
            raise InvalidGeometry(
                f"Template {self.id!r} has non-positive canvas size "
                f"{self.canvas_width}x{self.canvas_height}")

        named_rects = (
            [(f"edit zone {z.id!r}", z.rect) for z in self.edit_zones] +
            [(f"decorative slot {s.id!r}", s.rect) for s in self.decorative_slots] +
            [(f"base region {b.id!r}", b.rect) for b in self.base_regions]
        )
        for label, rect in named_rects:
            if not rect.is_within(self.real_world_width, self.real_world_height):
                raise InvalidGeometry(
                    f"Template {self.id!r}: {label} {rect} lies outside "
                    f"{self.real_world_width}x{self.real_world_height} in")

        if self.default_material_id and not self.permits_material(self.default_material_id):
            raise InvalidReference("material", self.default_material_id,
                                   f"default of template {self.id!r} is not a permitted material")

    def permits_material(self, material_id: str) -> bool:
        return material_id in self.available_materials

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Template':
        canvas = data.get('canvas') or {}
        return cls(
            id=str(data['id']),
            name=str(data.get('name', '')),
            category=str(_pick(data, 'category', 'productCategory', default='')),
            real_world_width=float(_pick(data, 'real_world_width', 'realWorldWidth', default=0.0)),
            real_world_height=float(_pick(data, 'real_world_height', 'realWorldHeight', default=0.0)),
            canvas_width=float(_pick(data, 'canvas_width', 'canvasWidth',
                                     default=canvas.get('width', 0.0))),
            canvas_height=float(_pick(data, 'canvas_height', 'canvasHeight',
                                      default=canvas.get('height', 0.0))),
            edit_zones=tuple(EditZone.from_dict(z)
                             for z in _pick(data, 'edit_zones', 'editZones', default=[])),
            decorative_slots=tuple(DecorativeSlot.from_dict(s)
                                   for s in _pick(data, 'decorative_slots', 'decorativeSlots',
                                                  'floral', default=[])),
            base_regions=tuple(BaseRegion.from_dict(b)
                               for b in _pick(data, 'base_regions', 'baseRegions',
                                              'productBase', default=[])),
            available_materials=tuple(_pick(data, 'available_materials', 'availableMaterials',
                                            default=[])),
            default_material_id=str(_pick(data, 'default_material_id', 'defaultMaterialId',
                                          default=''))
        )


@dataclass(frozen=True)
class Material:
    """A finish or texture; immutable once referenced."""
    id: str
    name: str
    texture_ref: str = ""
    swatch_ref: str = ""
    overlay_fill: Optional[str] = None
    category: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Material':
        return cls(
            id=str(data['id']),
            name=str(data.get('name', '')),
            texture_ref=str(_pick(data, 'texture_ref', 'textureUrl', default='')),
            swatch_ref=str(_pick(data, 'swatch_ref', 'swatch', default='')),
            overlay_fill=_pick(data, 'overlay_fill', 'overlayFill'),
            category=str(data.get('category', ''))
        )


@dataclass(frozen=True)
class Font:
    """Typeface metadata. Stored documents refer to fonts by family name."""
    id: str
    family: str
    source: str
    category: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Font':
        return cls(
            id=str(data['id']),
            family=str(_pick(data, 'family', 'fontFamily', 'name', default='')),
            source=str(_pick(data, 'source', 'fileName', 'file_name', default='')),
            category=str(data.get('category', ''))
        )


R = TypeVar('R')


class _Catalog(Generic[R]):
    """Ordered, read-only id lookup shared by all catalogs."""

    kind = "record"

    def __init__(self, records: Iterable[R]):
        self._records: Dict[str, R] = {}
        for record in records:
            if record.id in self._records:
                logger.warning(f"Duplicate {self.kind} id {record.id!r}, keeping the first")
                continue
            self._records[record.id] = record

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: str) -> bool:
        return record_id in self._records

    def get_by_id(self, record_id: str) -> Optional[R]:
        return self._records.get(record_id)

    def require(self, record_id: str) -> R:
        """Like get_by_id, but raise InvalidReference when absent."""
        record = self._records.get(record_id)
        if record is None:
            raise InvalidReference(self.kind, record_id)
        return record

    def list_by_category(self, category: str) -> List[R]:
        return [r for r in self._records.values() if r.category == category]

    def all(self) -> List[R]:
        return list(self._records.values())


class TemplateCatalog(_Catalog[Template]):
    """Product templates, validated on load."""

    kind = "template"

    def __init__(self, templates: Iterable[Template]):
        templates = list(templates)
        for template in templates:
            template.validate()
        super().__init__(templates)


class MaterialCatalog(_Catalog[Material]):
    kind = "material"


class FontCatalog(_Catalog[Font]):
    """Typefaces, looked up by family name."""

    kind = "font"

    def __init__(self, fonts: Iterable[Font]):
        super().__init__(fonts)
        self._by_family: Dict[str, Font] = {}
        for font in self._records.values():
            self._by_family.setdefault(font.family, font)

    def get_by_family(self, family: str) -> Optional[Font]:
        return self._by_family.get(family)

    def source_map(self) -> Dict[str, str]:
        """Family name -> outline source file name."""
        return {family: font.source for family, font in self._by_family.items()}


@dataclass
class Catalogs:
    """The three catalogs one export needs."""
    templates: TemplateCatalog
    fonts: FontCatalog
    materials: MaterialCatalog = field(default_factory=lambda: MaterialCatalog([]))


def catalogs_from_dict(data: Dict[str, Any]) -> Catalogs:
    """Build catalogs from a dict with 'templates', 'fonts' and 'materials' lists."""
    templates = data.get('templates', [])
    if isinstance(templates, dict):
        templates = list(templates.values())
    return Catalogs(
        templates=TemplateCatalog(Template.from_dict(t) for t in templates),
        fonts=FontCatalog(Font.from_dict(f) for f in data.get('fonts', [])),
        materials=MaterialCatalog(Material.from_dict(m) for m in data.get('materials', []))
    )


def load_catalogs(filepath: str) -> Catalogs:
    """
    Load catalogs from a JSON file.

    Catalogs are loaded once and treated as immutable afterwards.
    """
    with open(Path(filepath), 'r', encoding='utf-8') as f:
        data = json.load(f)
    catalogs = catalogs_from_dict(data)
    logger.info(
        f"Loaded {len(catalogs.templates)} templates, {len(catalogs.fonts)} fonts "
        f"and {len(catalogs.materials)} materials from {filepath}")
    return catalogs
