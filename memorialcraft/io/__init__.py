"""
MemorialCraft I/O Module

Handles export and document files:
- VectorExporter: layered cut/engrave document
- DXF and SVG writers
- ProofRenderer: paginated approval PDF
- Document JSON files
"""

from .vector_document import (
    VectorDocument, VectorLayer, OutlineEntity, TextEntity, ArtworkEntity,
    OUTLINE_LAYER, TEXT_LAYER, ARTWORK_LAYER
)
from .vector_export import VectorExporter, VectorExportResult
from .svg_writer import svg_bytes, export_svg
from .dxf_writer import DXFWriter, dxf_bytes, export_dxf
from .proof_renderer import ProofRenderer, ProofDocument, PagePlacement, paginate
from .project_io import (
    save_document, load_document, document_to_dict, dict_to_document,
    artwork_template_to_dict, dict_to_artwork_template
)

__all__ = [
    'VectorDocument', 'VectorLayer', 'OutlineEntity', 'TextEntity', 'ArtworkEntity',
    'OUTLINE_LAYER', 'TEXT_LAYER', 'ARTWORK_LAYER',
    'VectorExporter', 'VectorExportResult',
    'svg_bytes', 'export_svg',
    'DXFWriter', 'dxf_bytes', 'export_dxf',
    'ProofRenderer', 'ProofDocument', 'PagePlacement', 'paginate',
    'save_document', 'load_document', 'document_to_dict', 'dict_to_document',
    'artwork_template_to_dict', 'dict_to_artwork_template',
]
