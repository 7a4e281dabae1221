"""
MemorialCraft Fonts Module

Font family resolution and text-to-outline conversion.
"""

from .font_manager import FontResolver, FontResolution, ResolvedFont
from .outliner import QtGlyphOutliner, FontLoadError, ensure_gui_application

__all__ = [
    'FontResolver', 'FontResolution', 'ResolvedFont',
    'QtGlyphOutliner', 'FontLoadError', 'ensure_gui_application',
]
