"""
Tests for Qt glyph outlining.

Uses the Vera font bundled with reportlab; skipped when PyQt6 or the
font file is unavailable.
"""

import os
import unittest

import reportlab

from memorialcraft.core import BoundingBox, DesignDocument, FontCatalog, Font, TextElement
from memorialcraft.fonts import FontLoadError

VERA = os.path.join(os.path.dirname(reportlab.__file__), 'fonts', 'Vera.ttf')

try:
    from memorialcraft.fonts import QtGlyphOutliner, ensure_gui_application
    ensure_gui_application()
    HAS_QT = True
except Exception:
    HAS_QT = False


@unittest.skipUnless(HAS_QT and os.path.isfile(VERA), "PyQt6 or Vera.ttf not available")
class TestQtGlyphOutliner(unittest.TestCase):
    """Test QtGlyphOutliner against a real font."""

    def setUp(self):
        self.outliner = QtGlyphOutliner()

    def test_outlines_scale_with_size(self):
        """Glyph outlines are closed polylines sized in inches."""
        paths = self.outliner.outline("HI", VERA, 2.0)
        self.assertGreaterEqual(len(paths), 2)
        for path in paths:
            self.assertGreaterEqual(len(path), 3)
        bounds = BoundingBox.from_points([p for path in paths for p in path])
        # Cap height of Vera is ~0.73 em, text box starts at the top
        self.assertGreater(bounds.height, 1.0)
        self.assertLess(bounds.height, 2.0)
        self.assertGreaterEqual(bounds.min_y, 0.0)
        self.assertGreater(bounds.width, 1.0)

    def test_outline_is_deterministic(self):
        """Same text, same font, same points."""
        first = self.outliner.outline("Smith", VERA, 1.5)
        second = QtGlyphOutliner().outline("Smith", VERA, 1.5)
        self.assertEqual(first, second)

    def test_blank_text(self):
        """Whitespace produces no outlines."""
        self.assertEqual(self.outliner.outline("   ", VERA, 1.0), [])

    def test_multiline_text_goes_down(self):
        """A second line sits below the first."""
        one = self.outliner.outline("A", VERA, 1.0)
        two = self.outliner.outline("A\nA", VERA, 1.0)
        max_one = max(p.y for path in one for p in path)
        max_two = max(p.y for path in two for p in path)
        self.assertGreater(max_two, max_one + 0.5)

    def test_missing_file(self):
        """Missing font files raise FontLoadError."""
        with self.assertRaises(FontLoadError):
            self.outliner.outline("A", "/nonexistent/font.ttf", 1.0)

    def test_vector_export_with_real_font(self):
        """End to end: the exporter emits real glyph geometry."""
        from memorialcraft.io import VectorExporter
        from tests.helpers import make_template

        fonts = FontCatalog([Font('vera', 'Bitstream Vera Sans', VERA, 'sans-serif')])
        doc = DesignDocument(template_id='template-001', material_id='mat-002')
        doc.add_element(TextElement("In Loving Memory", "Bitstream Vera Sans", 2.0, x=15, y=4))
        result = VectorExporter(fonts, outliner=self.outliner).export(doc, make_template())
        self.assertEqual(result.warnings, [])
        entity = result.document.text.entities[0]
        self.assertGreater(len(entity.glyph_paths), 10)
        bounds = BoundingBox.from_points([p for path in entity.world_paths() for p in path])
        self.assertGreaterEqual(bounds.min_x, 15.0)
        self.assertGreaterEqual(bounds.min_y, 4.0)


if __name__ == '__main__':
    unittest.main()
