"""
MemorialCraft

Composes memorial markers from product templates and customer content,
and exports cut/engrave vector files and paginated approval proofs.
"""

__version__ = "0.1.0"

from .core import (
    Template, Font, Material, TemplateCatalog, FontCatalog, MaterialCatalog,
    Catalogs, load_catalogs, catalogs_from_dict,
    DesignDocument, DocumentStatus, ArtworkTemplate,
    TextElement, ArtworkElement, CoordinateTransform, ExportSettings,
    MemorialCraftError, InvalidReference, InvalidGeometry, InvalidState,
    CaptureFailure, UnresolvedFont
)
from .exporter import ExportService, VectorArtifact

__all__ = [
    'Template', 'Font', 'Material', 'TemplateCatalog', 'FontCatalog', 'MaterialCatalog',
    'Catalogs', 'load_catalogs', 'catalogs_from_dict',
    'DesignDocument', 'DocumentStatus', 'ArtworkTemplate',
    'TextElement', 'ArtworkElement', 'CoordinateTransform', 'ExportSettings',
    'MemorialCraftError', 'InvalidReference', 'InvalidGeometry', 'InvalidState',
    'CaptureFailure', 'UnresolvedFont',
    'ExportService', 'VectorArtifact',
]
