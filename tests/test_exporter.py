"""
Tests for the async export service.
"""

import asyncio
import unittest

import numpy as np

from memorialcraft import (
    ArtworkElement, CaptureFailure, DesignDocument, ExportService, ExportSettings,
    InvalidReference, TextElement
)
from tests.helpers import FakeOutliner, make_catalogs, make_template


class RecordingCapture:
    """Synchronous capture returning a fixed 300x400 bitmap."""

    def __init__(self):
        self.calls = []

    def __call__(self, document, template, material, elements):
        self.calls.append((document, template, material, elements))
        return np.full((400, 300, 3), 200, dtype=np.uint8)


class TestExportService(unittest.TestCase):
    """Test ExportService."""

    def setUp(self):
        self.catalogs = make_catalogs()
        self.capture = RecordingCapture()
        self.service = ExportService(self.catalogs, outliner=FakeOutliner(),
                                     capture=self.capture)
        self.doc = DesignDocument.from_template(make_template(), title="Smith")
        self.text = TextElement("In Loving Memory", "Times New Roman", 1.5, x=15, y=3)
        self.doc.add_element(self.text)
        self.doc.add_element(ArtworkElement("roses.png", x=2, y=6, width=6, height=10))

    def test_export_dxf(self):
        artifact = asyncio.run(self.service.export_vector(self.doc, "dxf"))
        self.assertEqual(artifact.format, "dxf")
        self.assertIn(b"SECTION", artifact.data[:64])
        self.assertEqual(len(artifact.document.text), 1)
        self.assertEqual(artifact.warnings, [])

    def test_export_svg(self):
        artifact = asyncio.run(self.service.export_vector(self.doc, "svg"))
        self.assertEqual(artifact.format, "svg")
        self.assertTrue(artifact.data.startswith(b"<?xml"))

    def test_repeat_exports_are_identical(self):
        """Same document, same bytes."""
        first = asyncio.run(self.service.export_vector(self.doc, "dxf"))
        second = asyncio.run(self.service.export_vector(self.doc, "dxf"))
        self.assertEqual(first.data, second.data)

    def test_unknown_format_rejected(self):
        with self.assertRaises(ValueError):
            asyncio.run(self.service.export_vector(self.doc, "pdf"))

    def test_font_fallback_reported(self):
        """Unknown families still export, with a warning."""
        self.doc.add_element(TextElement("Forever", "Old English", 1.0))
        artifact = asyncio.run(self.service.export_vector(self.doc))
        self.assertEqual([w.family for w in artifact.warnings], ['Old English'])

    def test_missing_material_fails_closed(self):
        """A dangling material reference fails the export."""
        doc = DesignDocument(template_id='template-001', material_id='mat-404')
        with self.assertRaises(InvalidReference):
            asyncio.run(self.service.export_vector(doc))
        with self.assertRaises(InvalidReference):
            asyncio.run(self.service.export_proof(doc))
        self.assertEqual(self.capture.calls, [])

    def test_missing_template_fails_closed(self):
        doc = DesignDocument(template_id='template-404', material_id='mat-002')
        with self.assertRaises(InvalidReference):
            asyncio.run(self.service.export_vector(doc))

    def test_approved_document_exports(self):
        """Approved documents can still be exported."""
        self.doc.approve()
        artifact = asyncio.run(self.service.export_vector(self.doc))
        self.assertEqual(len(artifact.document.artwork), 1)
        proof = asyncio.run(self.service.export_proof(self.doc))
        self.assertEqual(proof.page_count, 2)

    def test_export_proof(self):
        """The capture is paginated onto landscape pages."""
        proof = asyncio.run(self.service.export_proof(self.doc))
        self.assertTrue(proof.pdf.startswith(b'%PDF'))
        self.assertAlmostEqual(proof.final_height, 396.0)
        self.assertEqual([p.offset for p in proof.placements], [0.0, -210.0])

    def test_capture_receives_snapshot(self):
        """The capture works on copies taken when the export started."""
        asyncio.run(self.service.export_proof(self.doc))
        document, template, material, elements = self.capture.calls[0]
        self.assertIs(document, self.doc)
        self.assertEqual(template.id, 'template-001')
        self.assertEqual(material.id, 'mat-002')
        self.assertEqual(elements[0], self.text)
        self.assertIsNot(elements[0], self.text)

    def test_default_capture_uses_material_from_export_start(self):
        """A material change made while the export runs doesn't reach the proof."""
        class EditedDuringExport(ExportService):
            def prepare(self, document):
                job = super().prepare(document)
                document.set_material('mat-001')
                return job

        class KeepBitmap:
            def render(self, bitmap, title):
                return bitmap

        service = EditedDuringExport(self.catalogs, ExportSettings(raster_dpi=2, oversampling=1),
                                     outliner=FakeOutliner())
        service.proof_renderer = KeepBitmap()
        doc = DesignDocument.from_template(make_template())
        bitmap = asyncio.run(service.export_proof(doc))

        self.assertEqual(doc.material_id, 'mat-001')
        self.assertEqual(bitmap.size, (120, 52))
        # Face keeps the Grey Granite fill of mat-002, not mat-001's #101010
        self.assertEqual(bitmap.getpixel((60, 20)), (137, 137, 137))

    def test_async_capture(self):
        """Coroutine captures are awaited."""
        async def capture(document, template, material, elements):
            await asyncio.sleep(0)
            return np.zeros((100, 300, 3), dtype=np.uint8)

        service = ExportService(self.catalogs, outliner=FakeOutliner(), capture=capture)
        proof = asyncio.run(service.export_proof(self.doc))
        self.assertEqual(proof.page_count, 1)

    def test_capture_failure(self):
        """Collaborator errors surface as CaptureFailure."""
        def capture(document, template, material, elements):
            raise RuntimeError("canvas not ready")

        service = ExportService(self.catalogs, outliner=FakeOutliner(), capture=capture)
        with self.assertRaises(CaptureFailure) as ctx:
            asyncio.run(service.export_proof(self.doc))
        self.assertIsInstance(ctx.exception.__cause__, RuntimeError)

    def test_capture_returning_nothing(self):
        service = ExportService(self.catalogs, outliner=FakeOutliner(),
                                capture=lambda document, template, material, elements: None)
        with self.assertRaises(CaptureFailure):
            asyncio.run(service.export_proof(self.doc))

    def test_invalid_settings_rejected(self):
        with self.assertRaises(ValueError):
            ExportService(self.catalogs, ExportSettings(precision=2))


if __name__ == '__main__':
    unittest.main()
