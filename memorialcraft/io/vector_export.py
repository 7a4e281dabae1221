"""
Vector Exporter for MemorialCraft

Builds a scale-accurate, layered VectorDocument from a DesignDocument.
Element order is preserved exactly, so the same document always produces
the same entities in the same order.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from ..core.catalog import FontCatalog, Template
from ..core.document import DesignDocument
from ..core.elements import ArtworkElement, DesignElement, TextElement
from ..core.errors import InvalidReference, UnresolvedFont
from ..core.geometry import Point, Rect
from ..core.settings import ExportSettings
from ..fonts.font_manager import FontResolution, FontResolver
from ..fonts.outliner import FontLoadError, QtGlyphOutliner
from .vector_document import (
    ArtworkEntity, OutlineEntity, TextEntity, VectorDocument
)

logger = logging.getLogger(__name__)


class GlyphOutliner(Protocol):
    """Anything that can turn text in a font file into polylines (inches)."""

    def outline(self, text: str, source: str, size: float) -> List[List[Point]]:
        ...


@dataclass
class VectorExportResult:
    """A vector document plus the non-fatal warnings raised building it."""
    document: VectorDocument
    warnings: List[UnresolvedFont] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.warnings


class VectorExporter:
    """
    Export a DesignDocument to a layered VectorDocument.

    Layers:
    - outline: template edit zones then base regions
    - text: one glyph-run entity per TextElement
    - artwork: one placement entity per ArtworkElement
    """

    def __init__(self, fonts: FontCatalog,
                 settings: Optional[ExportSettings] = None,
                 outliner: Optional[GlyphOutliner] = None):
        self.fonts = fonts
        self.settings = settings or ExportSettings()
        self._outliner = outliner

    @property
    def outliner(self) -> GlyphOutliner:
        if self._outliner is None:
            self._outliner = QtGlyphOutliner()
        return self._outliner

    def export(self, document: DesignDocument, template: Template,
               elements: Optional[List[DesignElement]] = None) -> VectorExportResult:
        """
        Export a document.

        Args:
            document: The document to export (any status)
            template: The document's template
            elements: A pre-taken snapshot of the elements; taken here if omitted

        Raises:
            InvalidReference: template doesn't match the document
            InvalidGeometry: template has non-positive dimensions
        """
        if template.id != document.template_id:
            raise InvalidReference("template", document.template_id,
                                   f"document {document.id} was given template {template.id!r}")
        template.validate()

        if elements is None:
            elements = document.snapshot()

        # Resolve every font before emitting anything
        resolution = FontResolver(self.fonts, self.settings).resolve(
            (e.font_family, e.element_id) for e in elements if isinstance(e, TextElement))
        warnings: List[UnresolvedFont] = list(resolution.warnings)

        vector_doc = VectorDocument(
            name=document.title,
            width=template.real_world_width,
            height=template.real_world_height
        )
        self._add_outline(vector_doc, template)

        for sequence, element in enumerate(elements):
            if isinstance(element, TextElement):
                entity = self._text_entity(element, sequence, resolution, warnings)
                vector_doc.text.add_entity(entity)
            elif isinstance(element, ArtworkElement):
                vector_doc.artwork.add_entity(self._artwork_entity(element, sequence))
            else:
                raise TypeError(f"Unsupported design element: {type(element).__name__}")
            logger.debug(f"Emitted {element.kind} entity for element {element.element_id}")

        logger.info(
            f"Vector export of document {document.id}: {len(vector_doc.text)} text, "
            f"{len(vector_doc.artwork)} artwork entities, {len(warnings)} warnings")
        return VectorExportResult(document=vector_doc, warnings=warnings)

    def _round(self, value: float) -> float:
        return round(value, self.settings.precision)

    def _rect(self, rect: Rect) -> Rect:
        return Rect(self._round(rect.x), self._round(rect.y),
                    self._round(rect.width), self._round(rect.height))

    def _add_outline(self, vector_doc: VectorDocument, template: Template) -> None:
        for zone in template.edit_zones:
            vector_doc.outline.add_entity(
                OutlineEntity(name=zone.id, kind="edit_zone", rect=self._rect(zone.rect)))
        for base in template.base_regions:
            vector_doc.outline.add_entity(
                OutlineEntity(name=base.id or "base", kind="base_region",
                              rect=self._rect(base.rect)))

    def _text_entity(self, element: TextElement, sequence: int,
                     resolution: FontResolution,
                     warnings: List[UnresolvedFont]) -> TextEntity:
        resolved = resolution[element.font_family]
        glyph_paths: List[List[Point]] = []

        if resolved.is_available:
            try:
                raw_paths = self.outliner.outline(element.content, resolved.source,
                                                  element.font_size)
                precision = self.settings.precision
                glyph_paths = [[p.rounded(precision) for p in path] for path in raw_paths]
            except FontLoadError as e:
                logger.warning(f"Could not outline element {element.element_id}: {e}")
                warnings.append(UnresolvedFont(family=resolved.family, fallback_family="",
                                               element_id=element.element_id))

        return TextEntity(
            name=element.element_id,
            content=element.content,
            font_family=resolved.family,
            height=self._round(element.font_size),
            insert=Point(self._round(element.x), self._round(element.y)),
            rotation=self._round(element.rotation),
            sequence=sequence,
            glyph_paths=glyph_paths
        )

    def _artwork_entity(self, element: ArtworkElement, sequence: int) -> ArtworkEntity:
        return ArtworkEntity(
            name=element.element_id,
            image_ref=element.image_ref,
            rect=self._rect(element.rect),
            rotation=self._round(element.rotation),
            sequence=sequence
        )
