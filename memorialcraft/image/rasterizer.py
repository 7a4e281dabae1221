"""
Design Rasterizer for MemorialCraft

Composes a DesignDocument into a bitmap for the approval proof: material
texture, base band, decorative artwork, then the design elements in
z-order. Renders at ``raster_dpi * oversampling`` pixels per inch.
"""

import logging
import math
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from ..core.catalog import Catalogs, Material, Template
from ..core.document import DesignDocument
from ..core.elements import ArtworkElement, DesignElement, TextElement
from ..core.geometry import Point, Rect
from ..core.settings import ExportSettings
from ..fonts.font_manager import FontResolver

logger = logging.getLogger(__name__)

# Used when a material has neither a readable texture nor a fill colour
DEFAULT_MATERIAL_FILL = "#808080"


class DesignRasterizer:
    """
    Rasterize documents for proofs.

    Image and texture references are resolved relative to ``assets_dir``.
    Missing decorative or texture images are skipped with a warning;
    missing artwork is an error, since it is customer content.
    """

    def __init__(self, catalogs: Catalogs,
                 settings: Optional[ExportSettings] = None,
                 assets_dir: Optional[str] = None):
        self.catalogs = catalogs
        self.settings = settings or ExportSettings()
        self.assets_dir = Path(assets_dir) if assets_dir else None

    @property
    def pixels_per_inch(self) -> float:
        return self.settings.raster_dpi * self.settings.oversampling

    def canvas_size(self, template: Template) -> Tuple[int, int]:
        ppi = self.pixels_per_inch
        return (max(1, round(template.real_world_width * ppi)),
                max(1, round(template.real_world_height * ppi)))

    def _asset_path(self, ref: str) -> Path:
        path = Path(ref)
        if self.assets_dir is not None and not path.is_absolute():
            path = self.assets_dir / path
        return path

    def _px(self, inches: float) -> int:
        return int(round(inches * self.pixels_per_inch))

    def _box(self, rect: Rect) -> Tuple[int, int, int, int]:
        return (self._px(rect.x), self._px(rect.y),
                max(1, self._px(rect.width)), max(1, self._px(rect.height)))

    def render(self, document: DesignDocument, template: Template,
               elements: Optional[List[DesignElement]] = None,
               material: Optional[Material] = None) -> Image.Image:
        """
        Compose the document into an RGB image.

        Args:
            document: The document to render
            template: Its template
            elements: A pre-taken element snapshot; taken here if omitted
            material: The face material resolved when the export started;
                looked up from the document if omitted
        """
        template.validate()
        if elements is None:
            elements = document.snapshot()
        if material is None:
            material = self.catalogs.materials.get_by_id(document.material_id)

        width, height = self.canvas_size(template)
        image = Image.new('RGB', (width, height), self.settings.background)

        self._fill_material(image, material, Rect(0, 0, template.real_world_width,
                                                  template.real_world_height))
        for base in template.base_regions:
            self._fill_material(image, self.catalogs.materials.get_by_id(base.material_id),
                                base.rect)

        for slot in template.decorative_slots:
            path = self._asset_path(slot.image_ref)
            if not path.is_file():
                logger.warning(f"Decorative image {slot.image_ref!r} not found, skipping slot {slot.id}")
                continue
            with Image.open(path) as art:
                self._paste(image, art.convert('RGBA'), slot.rect, 0.0)

        fonts = FontResolver(self.catalogs.fonts, self.settings).resolve(
            (e.font_family, e.element_id) for e in elements if isinstance(e, TextElement))

        for element in elements:
            if isinstance(element, TextElement):
                self._draw_text(image, element, fonts[element.font_family].source)
            elif isinstance(element, ArtworkElement):
                path = self._asset_path(element.image_ref)
                with Image.open(path) as art:
                    self._paste(image, art.convert('RGBA'), element.rect, element.rotation)

        logger.debug(f"Rasterized document {document.id} at {width}x{height} px")
        return image

    def render_array(self, document: DesignDocument, template: Template,
                     elements: Optional[List[DesignElement]] = None,
                     material: Optional[Material] = None) -> np.ndarray:
        """Like render, returning an (H, W, 3) uint8 array."""
        return np.asarray(self.render(document, template, elements, material), dtype=np.uint8)

    def _fill_material(self, image: Image.Image, material: Optional[Material],
                       rect: Rect) -> None:
        x, y, w, h = self._box(rect)
        texture = None
        if material is not None and material.texture_ref:
            path = self._asset_path(material.texture_ref)
            if path.is_file():
                with Image.open(path) as tex:
                    texture = np.asarray(tex.convert('RGB'), dtype=np.uint8)
            else:
                logger.warning(f"Texture {material.texture_ref!r} for material {material.id} not found")

        if texture is not None and texture.size:
            reps = (math.ceil(h / texture.shape[0]), math.ceil(w / texture.shape[1]), 1)
            tiled = np.tile(texture, reps)[:h, :w]
            image.paste(Image.fromarray(tiled), (x, y))
        else:
            fill = (material.overlay_fill if material is not None and material.overlay_fill
                    else DEFAULT_MATERIAL_FILL)
            image.paste(Image.new('RGB', (w, h), fill), (x, y))

    def _paste(self, image: Image.Image, layer: Image.Image, rect: Rect,
               rotation: float) -> None:
        x, y, w, h = self._box(rect)
        layer = layer.resize((w, h), Image.Resampling.LANCZOS)
        self._paste_rotated(image, layer, Point(x, y), rotation)

    def _paste_rotated(self, image: Image.Image, layer: Image.Image,
                       top_left: Point, rotation: float) -> None:
        """Paste an RGBA layer so its top-left corner lands on top_left, rotated about it."""
        if rotation:
            w, h = layer.size
            center = Point(w / 2, h / 2)
            corners = [Point(0, 0).rotate(rotation, center),
                       Point(w, 0).rotate(rotation, center),
                       Point(w, h).rotate(rotation, center),
                       Point(0, h).rotate(rotation, center)]
            min_x = min(c.x for c in corners)
            min_y = min(c.y for c in corners)
            # PIL rotates counter-clockwise; rotation is clockwise on screen
            layer = layer.rotate(-rotation, resample=Image.Resampling.BICUBIC, expand=True)
            dx = corners[0].x - min_x
            dy = corners[0].y - min_y
        else:
            dx = dy = 0.0
        image.paste(layer, (int(round(top_left.x - dx)), int(round(top_left.y - dy))), layer)

    def _draw_text(self, image: Image.Image, element: TextElement,
                   source: Optional[str]) -> None:
        if not element.content.strip():
            return
        size_px = max(1, self._px(element.font_size))
        font = None
        if source is not None:
            try:
                font = ImageFont.truetype(source, size_px)
            except OSError as e:
                logger.warning(f"Could not load font {source}: {e}")
        if font is None:
            font = ImageFont.load_default()

        measure = ImageDraw.Draw(Image.new('RGBA', (1, 1)))
        left, top, right, bottom = measure.multiline_textbbox((0, 0), element.content, font=font)
        layer = Image.new('RGBA', (max(1, right), max(1, bottom)), (0, 0, 0, 0))
        ImageDraw.Draw(layer).multiline_text((0, 0), element.content, font=font,
                                             fill=element.color)
        self._paste_rotated(image, layer, Point(self._px(element.x), self._px(element.y)),
                            element.rotation)
