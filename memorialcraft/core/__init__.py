"""
MemorialCraft Core Module

Contains the core data structures:
- Catalogs: Template, Font and Material records and their repositories
- DesignDocument: a template reference, a material and ordered elements
- Elements: TextElement, ArtworkElement
- CoordinateTransform: pixel <-> inch mapping
"""

# Import order matters - geometry first, then catalog, then document
from .geometry import Point, BoundingBox, Rect
from .errors import (
    MemorialCraftError, InvalidReference, InvalidGeometry,
    InvalidState, CaptureFailure, UnresolvedFont
)
from .settings import ExportSettings
from .catalog import (
    EditZone, DecorativeSlot, BaseRegion, Template, Material, Font,
    TemplateCatalog, FontCatalog, MaterialCatalog, Catalogs,
    catalogs_from_dict, load_catalogs
)
from .elements import TextElement, ArtworkElement, DesignElement
from .document import DesignDocument, DocumentStatus, ArtworkTemplate
from .transform import CoordinateTransform

__all__ = [
    'Point', 'BoundingBox', 'Rect',
    'MemorialCraftError', 'InvalidReference', 'InvalidGeometry',
    'InvalidState', 'CaptureFailure', 'UnresolvedFont',
    'ExportSettings',
    'EditZone', 'DecorativeSlot', 'BaseRegion', 'Template', 'Material', 'Font',
    'TemplateCatalog', 'FontCatalog', 'MaterialCatalog', 'Catalogs',
    'catalogs_from_dict', 'load_catalogs',
    'TextElement', 'ArtworkElement', 'DesignElement',
    'DesignDocument', 'DocumentStatus', 'ArtworkTemplate',
    'CoordinateTransform',
]
