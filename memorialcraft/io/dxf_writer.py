"""
DXF Writer for MemorialCraft

Serialises a VectorDocument to a DXF drawing in inches for cutting and
engraving. DXF's y axis points up, so y is flipped against the template
height and rotations are negated.
"""

import io
import logging
import threading
from typing import Tuple

import ezdxf
from ezdxf import units

from ..core.geometry import Point
from .vector_document import (
    ARTWORK_LAYER, OUTLINE_LAYER, TEXT_LAYER,
    ArtworkEntity, OutlineEntity, TextEntity, VectorDocument
)

logger = logging.getLogger(__name__)

APP_ID = "MEMORIALCRAFT"

# ezdxf's fixed-metadata switch is process-wide; writers hold this while it is set
_fixed_metadata_lock = threading.Lock()

# AutoCAD Color Index per layer
LAYER_ACI = {
    OUTLINE_LAYER: 5,   # blue
    TEXT_LAYER: 7,      # black/white
    ARTWORK_LAYER: 1,   # red
}


def _xdata_text(text: str) -> str:
    """XDATA strings are single-line and at most 255 characters."""
    return text.replace("\n", "\\P")[:255]


class DXFWriter:
    """Write VectorDocuments as DXF."""

    def __init__(self, dxf_version: str = "R2010", precision: int = 4):
        self.dxf_version = dxf_version
        self.precision = precision

    def _flip(self, point: Point, height: float) -> Tuple[float, float]:
        return (round(point.x, self.precision), round(height - point.y, self.precision))

    def build(self, document: VectorDocument):
        """Build an ezdxf drawing from a VectorDocument."""
        doc = ezdxf.new(dxfversion=self.dxf_version, setup=False)
        doc.units = units.IN
        doc.header['$MEASUREMENT'] = 0
        doc.header['$EXTMIN'] = (0, 0, 0)
        doc.header['$EXTMAX'] = (document.width, document.height, 0)
        doc.appids.new(APP_ID)

        for layer in document.layers:
            doc.layers.add(layer.name, color=LAYER_ACI.get(layer.name, 7))

        msp = doc.modelspace()
        height = document.height

        for entity in document.outline.entities:
            self._add_outline(msp, entity, height)

        for entity in document.content_entities():
            if isinstance(entity, TextEntity):
                self._add_text(doc, msp, entity, height)
            elif isinstance(entity, ArtworkEntity):
                self._add_artwork(msp, entity, height)
        return doc

    def _add_outline(self, msp, entity: OutlineEntity, height: float) -> None:
        points = [self._flip(p, height) for p in entity.rect.corners()[:-1]]
        polyline = msp.add_lwpolyline(points, close=True,
                                      dxfattribs={'layer': OUTLINE_LAYER})
        polyline.set_xdata(APP_ID, [(1000, entity.kind), (1000, entity.name)])

    def _add_text(self, doc, msp, entity: TextEntity, height: float) -> None:
        # One block per glyph run, placed by a rotated INSERT
        block_name = f"TEXT_{entity.sequence:04d}"
        block = doc.blocks.new(name=block_name)
        for path_points in entity.glyph_paths:
            if len(path_points) < 2:
                continue
            local = [(round(p.x, self.precision), round(-p.y, self.precision))
                     for p in path_points]
            block.add_lwpolyline(local, close=True, dxfattribs={'layer': TEXT_LAYER})

        insert = msp.add_blockref(block_name, self._flip(entity.insert, height),
                                  dxfattribs={'layer': TEXT_LAYER,
                                              'rotation': -entity.rotation})
        insert.set_xdata(APP_ID, [
            (1000, entity.name),
            (1000, _xdata_text(entity.content)),
            (1000, entity.font_family),
            (1040, entity.height),
        ])

    def _add_artwork(self, msp, entity: ArtworkEntity, height: float) -> None:
        points = [self._flip(p, height) for p in entity.world_paths()[0][:-1]]
        polyline = msp.add_lwpolyline(points, close=True,
                                      dxfattribs={'layer': ARTWORK_LAYER})
        polyline.set_xdata(APP_ID, [
            (1000, entity.name),
            (1000, entity.image_ref),
            (1040, entity.rotation),
        ])

    def to_bytes(self, document: VectorDocument) -> bytes:
        """
        Serialise to DXF bytes.

        Creation timestamps and GUIDs are pinned so an unchanged document
        always serialises to identical bytes.
        """
        doc = self.build(document)
        stream = io.StringIO()
        with _fixed_metadata_lock:
            previous = ezdxf.options.write_fixed_meta_data_for_testing
            ezdxf.options.write_fixed_meta_data_for_testing = True
            try:
                doc.write(stream)
            finally:
                ezdxf.options.write_fixed_meta_data_for_testing = previous
        data = stream.getvalue().encode(doc.output_encoding)
        logger.debug(f"Wrote {len(data)} bytes of DXF for '{document.name}'")
        return data


def export_dxf(document: VectorDocument, filepath: str,
               dxf_version: str = "R2010", precision: int = 4) -> None:
    """Export a VectorDocument to a DXF file."""
    data = DXFWriter(dxf_version, precision).to_bytes(document)
    with open(filepath, 'wb') as f:
        f.write(data)


def dxf_bytes(document: VectorDocument, dxf_version: str = "R2010",
              precision: int = 4) -> bytes:
    return DXFWriter(dxf_version, precision).to_bytes(document)
