"""
Proof Renderer for MemorialCraft

Lays a captured bitmap of the composed design onto fixed-size landscape
pages for customer approval. The bitmap is fitted to the page width; when
it is taller than one page, every page places the same full bitmap at a
growing negative offset and page clipping reveals the next slice.
"""

import io
import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

import numpy as np
from PIL import Image
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from ..core.errors import InvalidGeometry
from ..core.settings import ExportSettings

logger = logging.getLogger(__name__)

Bitmap = Union[np.ndarray, Image.Image]


@dataclass(frozen=True)
class PagePlacement:
    """Where the full bitmap sits on one page, in mm from the page top."""
    page_index: int
    offset: float

    def visible_slice(self, final_height: float, page_height: float) -> Tuple[float, float]:
        """The [start, end) band of the scaled bitmap this page shows."""
        start = max(0.0, -self.offset)
        end = min(final_height, page_height - self.offset)
        return (start, end)


@dataclass
class ProofDocument:
    """A rendered proof: PDF bytes plus the layout that produced them."""
    pdf: bytes
    page_width: float          # mm
    page_height: float         # mm
    final_width: float         # mm
    final_height: float        # mm
    placements: List[PagePlacement] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.placements)

    def visible_slices(self) -> List[Tuple[float, float]]:
        return [p.visible_slice(self.final_height, self.page_height)
                for p in self.placements]


def paginate(bitmap_width: int, bitmap_height: int,
             page_width: float, page_height: float) -> Tuple[float, float, List[PagePlacement]]:
    """
    Compute the scaled size and one placement per page.

    Returns:
        (final_width, final_height, placements)

    Raises:
        InvalidGeometry: zero-sized bitmap or page
    """
    if bitmap_width <= 0 or bitmap_height <= 0:
        raise InvalidGeometry(
            f"Cannot paginate an empty bitmap ({bitmap_width}x{bitmap_height} px)")
    if page_width <= 0 or page_height <= 0:
        raise InvalidGeometry(
            f"Page size must be positive, got {page_width}x{page_height} mm")

    final_width = page_width
    final_height = final_width * (bitmap_height / bitmap_width)

    placements = [PagePlacement(page_index=0, offset=0.0)]
    if final_height <= page_height:
        return final_width, final_height, placements

    # Each further page shifts the bitmap up by the height already shown.
    # The seam is not compensated when final_height isn't a multiple of
    # page_height; the last page shows the remainder and then blank space.
    height_left = final_height - page_height
    while height_left > 0:
        offset = height_left - final_height
        placements.append(PagePlacement(page_index=len(placements), offset=offset))
        height_left -= page_height

    return final_width, final_height, placements


def _to_uint8(array: np.ndarray) -> np.ndarray:
    """Map an array onto 0..255 by its dtype's range; out-of-range values are rejected."""
    if array.dtype == np.uint8:
        return array
    if array.dtype == np.bool_:
        return array.astype(np.uint8) * 255
    if array.dtype == np.uint16:
        return (array >> 8).astype(np.uint8)
    if np.issubdtype(array.dtype, np.floating):
        if np.isnan(array).any():
            raise InvalidGeometry("Bitmap contains NaN values")
        low, high = float(array.min()), float(array.max())
        if low >= 0.0 and high <= 1.0:
            return np.round(array * 255).astype(np.uint8)
        if low >= 0.0 and high <= 255.0:
            return np.round(array).astype(np.uint8)
        raise InvalidGeometry(f"Float bitmap values {low}..{high} are outside 0..1 and 0..255")
    if np.issubdtype(array.dtype, np.integer):
        low, high = int(array.min()), int(array.max())
        if low < 0 or high > 255:
            raise InvalidGeometry(f"{array.dtype} bitmap values {low}..{high} are outside 0..255")
        return array.astype(np.uint8)
    raise InvalidGeometry(f"Unsupported bitmap dtype {array.dtype}")


def _to_image(bitmap: Bitmap) -> Image.Image:
    if isinstance(bitmap, Image.Image):
        image = bitmap
    else:
        array = np.asarray(bitmap)
        if array.ndim not in (2, 3) or array.size == 0:
            raise InvalidGeometry(f"Bitmap has unusable shape {array.shape}")
        image = Image.fromarray(_to_uint8(array))
    if image.width <= 0 or image.height <= 0:
        raise InvalidGeometry(f"Bitmap has zero size ({image.width}x{image.height} px)")
    if image.mode not in ('RGB', 'L'):
        image = image.convert('RGB')
    return image


class ProofRenderer:
    """Render bitmaps to paginated landscape PDF proofs."""

    def __init__(self, settings: Optional[ExportSettings] = None):
        self.settings = settings or ExportSettings()

    @property
    def page_size(self) -> Tuple[float, float]:
        return (self.settings.page_width_mm, self.settings.page_height_mm)

    def render(self, bitmap: Bitmap, title: str = "Approval Proof") -> ProofDocument:
        """
        Render a bitmap to a proof PDF.

        Raises:
            InvalidGeometry: zero-dimension bitmap
        """
        image = _to_image(bitmap)

        page_width, page_height = self.page_size
        final_width, final_height, placements = paginate(
            image.width, image.height, page_width, page_height)

        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=(page_width * mm, page_height * mm),
                            invariant=1)
        pdf.setTitle(title)
        reader = ImageReader(image)

        for placement in placements:
            pdf.saveState()
            # Clip to the page so the overhanging bitmap never leaks
            clip = pdf.beginPath()
            clip.rect(0, 0, page_width * mm, page_height * mm)
            pdf.clipPath(clip, stroke=0, fill=0)
            # PDF origin is bottom-left; offsets are measured from the top
            y = page_height - (placement.offset + final_height)
            pdf.drawImage(reader, 0, y * mm,
                          width=final_width * mm, height=final_height * mm)
            pdf.restoreState()
            pdf.showPage()
        pdf.save()

        logger.info(
            f"Rendered proof '{title}': {image.width}x{image.height} px -> "
            f"{len(placements)} page(s), scaled height {final_height:.1f} mm")
        return ProofDocument(
            pdf=buffer.getvalue(),
            page_width=page_width,
            page_height=page_height,
            final_width=final_width,
            final_height=final_height,
            placements=placements
        )

    def expected_page_count(self, bitmap_width: int, bitmap_height: int) -> int:
        """ceil(scaled height / page height)."""
        page_width, page_height = self.page_size
        final_height = page_width * (bitmap_height / bitmap_width)
        return max(1, math.ceil(final_height / page_height))
