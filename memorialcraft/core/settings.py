"""
Export Settings for MemorialCraft

Configuration shared by the vector exporter, the rasterizer and the
proof renderer.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional


@dataclass
class ExportSettings:
    """Settings for vector and proof export."""

    # Fonts
    default_font_family: str = "Arial"   # Fallback when a family can't be resolved
    fonts_dir: Optional[str] = None       # Directory holding the catalog's font files

    # Vector output
    precision: int = 4                    # Decimal places for inches (0.0001")
    dxf_version: str = "R2010"

    # Proof page medium (A4 landscape)
    page_width_mm: float = 297.0
    page_height_mm: float = 210.0

    # Rasterization
    raster_dpi: float = 20.0              # Pixels per inch before oversampling
    oversampling: int = 2                 # Capture scale factor
    background: str = "#FFFFFF"

    def validate(self) -> tuple[bool, str]:
        """
        Validate settings.

        Returns:
            (is_valid, error_message)
        """
        if self.precision < 3:
            return False, f"Precision of {self.precision} decimals is coarser than 0.001 inch"
        if self.page_width_mm <= 0 or self.page_height_mm <= 0:
            return False, "Page dimensions must be positive"
        if self.raster_dpi <= 0:
            return False, "Raster DPI must be positive"
        if self.oversampling < 1:
            return False, "Oversampling factor must be at least 1"
        if not self.default_font_family:
            return False, "A default font family is required"
        return True, ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ExportSettings':
        """Build settings from a dict, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
