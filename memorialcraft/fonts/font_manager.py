"""
Font Resolution for MemorialCraft

Resolves the font families a document uses to outline source files before
any vector entity is emitted. The result is an explicit map handed to the
exporter; nothing is registered in a process-wide font database.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple
import logging

from ..core.catalog import FontCatalog
from ..core.errors import UnresolvedFont
from ..core.settings import ExportSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedFont:
    """Where the outlines for one requested family come from."""
    requested_family: str
    family: str
    source: Optional[str]      # None when even the default family is missing

    @property
    def is_fallback(self) -> bool:
        return self.family != self.requested_family

    @property
    def is_available(self) -> bool:
        return self.source is not None


@dataclass
class FontResolution:
    """Requested family -> ResolvedFont, plus the warnings raised on the way."""
    fonts: Dict[str, ResolvedFont] = field(default_factory=dict)
    warnings: List[UnresolvedFont] = field(default_factory=list)

    def __getitem__(self, family: str) -> ResolvedFont:
        return self.fonts[family]

    def __contains__(self, family: str) -> bool:
        return family in self.fonts


class FontResolver:
    """
    Resolves family names against a FontCatalog.

    Unknown families fall back to the configured default family and a
    warning is recorded; resolution itself never fails.
    """

    def __init__(self, fonts: FontCatalog, settings: Optional[ExportSettings] = None):
        self.fonts = fonts
        self.settings = settings or ExportSettings()

    def source_path(self, source: str) -> str:
        """Locate a catalog source file name, relative to fonts_dir when set."""
        if self.settings.fonts_dir and not Path(source).is_absolute():
            return str(Path(self.settings.fonts_dir) / source)
        return source

    def _lookup(self, family: str) -> Optional[str]:
        font = self.fonts.get_by_family(family)
        if font is None or not font.source:
            return None
        return self.source_path(font.source)

    def resolve(self, requests: Iterable[Tuple[str, str]]) -> FontResolution:
        """
        Resolve (family, element_id) pairs.

        Each family is resolved once; a warning is recorded for every
        element that asked for a missing family.
        """
        resolution = FontResolution()
        default_family = self.settings.default_font_family
        default_source = self._lookup(default_family)

        for family, element_id in requests:
            if family not in resolution.fonts:
                source = self._lookup(family)
                if source is not None:
                    resolution.fonts[family] = ResolvedFont(family, family, source)
                else:
                    resolution.fonts[family] = ResolvedFont(family, default_family, default_source)
                    logger.warning(
                        f"Font family '{family}' not in catalog, falling back to '{default_family}'")
                    if default_source is None:
                        logger.warning(f"Default font family '{default_family}' is not in catalog either")

            resolved = resolution.fonts[family]
            if resolved.is_fallback or not resolved.is_available:
                resolution.warnings.append(
                    UnresolvedFont(family=family, fallback_family=default_family,
                                   element_id=element_id))
        return resolution
