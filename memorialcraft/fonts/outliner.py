"""
Glyph Outliner for MemorialCraft

Converts a string in a given font file into outline polylines using Qt's
font engine (QRawFont + QPainterPath), the same engine the editor uses to
draw text. Curves are flattened by Qt's subpath polygon conversion.
"""

import logging
import os
from typing import Dict, List

from ..core.errors import MemorialCraftError
from ..core.geometry import Point

logger = logging.getLogger(__name__)

# Outlines are extracted at this em size and scaled down, which keeps
# Qt's curve flattening fine enough for inch-sized text.
REFERENCE_PIXEL_SIZE = 1000.0

_gui_app = None


def ensure_gui_application():
    """
    Make sure a QGuiApplication exists; Qt's font engine needs one.

    Uses the offscreen platform when no display platform is configured.
    """
    global _gui_app
    from PyQt6.QtGui import QGuiApplication

    app = QGuiApplication.instance()
    if app is None:
        if 'QT_QPA_PLATFORM' not in os.environ:
            os.environ['QT_QPA_PLATFORM'] = 'offscreen'
        _gui_app = QGuiApplication([])
        app = _gui_app
    return app


class FontLoadError(MemorialCraftError):
    """A font source could not be opened by the font engine."""


class QtGlyphOutliner:
    """
    Outlines text with Qt.

    Fonts are loaded per outliner instance and cached only for its
    lifetime, so one export never sees fonts loaded by another.
    """

    def __init__(self):
        self._raw_fonts: Dict[str, object] = {}

    def _load(self, source: str):
        if source in self._raw_fonts:
            return self._raw_fonts[source]

        ensure_gui_application()
        from PyQt6.QtGui import QFont, QRawFont

        if not os.path.isfile(source):
            raise FontLoadError(f"Font file not found: {source}")
        raw = QRawFont(source, REFERENCE_PIXEL_SIZE,
                       QFont.HintingPreference.PreferNoHinting)
        if not raw.isValid():
            raise FontLoadError(f"Font engine could not read {source}")
        logger.debug(f"Loaded font outlines from {source}")
        self._raw_fonts[source] = raw
        return raw

    def outline(self, text: str, source: str, size: float) -> List[List[Point]]:
        """
        Convert text to closed polylines.

        Args:
            text: Text content; newlines start a new line
            source: Path of a TrueType/OpenType file
            size: Em height in inches

        Returns:
            Polylines in inches relative to the top-left of the text box,
            with y growing downward.
        """
        if not text or not text.strip():
            return []

        from PyQt6.QtGui import QTransform

        raw = self._load(source)
        k = size / REFERENCE_PIXEL_SIZE
        line_height = raw.ascent() + raw.descent() + raw.leading()

        paths: List[List[Point]] = []
        for line_no, line in enumerate(text.split('\n')):
            if not line:
                continue
            baseline = raw.ascent() + line_no * line_height
            glyphs = raw.glyphIndexesForString(line)
            advances = raw.advancesForGlyphIndexes(glyphs)
            pen_x = 0.0
            for glyph, advance in zip(glyphs, advances):
                glyph_path = raw.pathForGlyph(glyph)
                for polygon in glyph_path.toSubpathPolygons(QTransform()):
                    if polygon.size() < 2:
                        continue
                    points = []
                    for i in range(polygon.size()):
                        pt = polygon.at(i)
                        points.append(Point((pt.x() + pen_x) * k, (pt.y() + baseline) * k))
                    paths.append(points)
                pen_x += advance.x()
        return paths
