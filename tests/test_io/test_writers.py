"""
Tests for the DXF and SVG writers.
"""

import io
import os
import tempfile
import unittest
import xml.etree.ElementTree as ET
from concurrent.futures import ThreadPoolExecutor

import ezdxf
from ezdxf import units

from memorialcraft.core import ArtworkElement, DesignDocument, TextElement
from memorialcraft.io import VectorExporter, dxf_bytes, export_dxf, svg_bytes
from memorialcraft.io.dxf_writer import APP_ID
from memorialcraft.io.svg_writer import INKSCAPE_NS, XLINK_NS
from tests.helpers import FakeOutliner, make_catalogs, make_template

SVG_NS = "http://www.w3.org/2000/svg"


def build_vector(elements):
    template = make_template()
    doc = DesignDocument.from_template(template, title="Smith")
    for element in elements:
        doc.add_element(element)
    exporter = VectorExporter(make_catalogs().fonts, outliner=FakeOutliner())
    return exporter.export(doc, template).document


class TestDXFWriter(unittest.TestCase):
    """Test DXF serialisation."""

    def setUp(self):
        self.text = TextElement("Smith\nFamily", "Times New Roman", 2.0, x=12, y=4, rotation=15)
        self.artwork = ArtworkElement("roses.png", x=2, y=6, width=6, height=10)
        self.vector = build_vector([self.text, self.artwork])

    def read_back(self, data):
        return ezdxf.read(io.StringIO(data.decode('utf-8')))

    def test_output_is_deterministic(self):
        """The same document serialises to identical bytes."""
        self.assertEqual(dxf_bytes(self.vector), dxf_bytes(self.vector))

    def test_concurrent_writes_are_deterministic(self):
        """Writers on several threads still produce one byte string."""
        flag_before = ezdxf.options.write_fixed_meta_data_for_testing
        with ThreadPoolExecutor(max_workers=8) as pool:
            outputs = list(pool.map(lambda _: dxf_bytes(self.vector), range(40)))
        self.assertEqual(len(set(outputs)), 1)
        self.assertEqual(ezdxf.options.write_fixed_meta_data_for_testing, flag_before)

    def test_layers_and_units(self):
        """Drawing is in inches with one layer per vector layer."""
        drawing = self.read_back(dxf_bytes(self.vector))
        self.assertEqual(drawing.units, units.IN)
        for name in ('outline', 'text', 'artwork'):
            self.assertTrue(drawing.layers.has_entry(name))

    def test_entities_and_y_flip(self):
        """Outlines, text inserts and artwork frames land where expected."""
        drawing = self.read_back(dxf_bytes(self.vector))
        msp = drawing.modelspace()

        outlines = msp.query('LWPOLYLINE[layer=="outline"]')
        self.assertEqual(len(outlines), 2)
        zone_points = list(outlines[0].get_points('xy'))
        # Zone top-left (10, 2.5) on a 26 in tall template
        self.assertAlmostEqual(zone_points[0][0], 10.0)
        self.assertAlmostEqual(zone_points[0][1], 23.5)
        self.assertTrue(outlines[0].closed)

        inserts = msp.query('INSERT[layer=="text"]')
        self.assertEqual(len(inserts), 1)
        insert = inserts[0]
        self.assertEqual(insert.dxf.name, 'TEXT_0000')
        self.assertAlmostEqual(insert.dxf.insert.x, 12.0)
        self.assertAlmostEqual(insert.dxf.insert.y, 22.0)
        self.assertAlmostEqual(insert.dxf.rotation, -15.0)
        tags = [tag.value for tag in insert.get_xdata(APP_ID)]
        self.assertEqual(tags[0], self.text.element_id)
        self.assertEqual(tags[1], "Smith\\PFamily")
        self.assertEqual(len(drawing.blocks.get('TEXT_0000').query('LWPOLYLINE')), 11)

        frames = msp.query('LWPOLYLINE[layer=="artwork"]')
        self.assertEqual(len(frames), 1)
        frame_points = list(frames[0].get_points('xy'))
        self.assertAlmostEqual(frame_points[0][0], 2.0)
        self.assertAlmostEqual(frame_points[0][1], 20.0)

    def test_export_to_file(self):
        """export_dxf writes the same bytes as dxf_bytes."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, 'marker.dxf')
            export_dxf(self.vector, path)
            with open(path, 'rb') as f:
                self.assertEqual(f.read(), dxf_bytes(self.vector))


class TestSVGWriter(unittest.TestCase):
    """Test SVG serialisation."""

    def setUp(self):
        self.text = TextElement("Rest", "Arial", 1.0, x=12, y=4, rotation=30)
        self.artwork = ArtworkElement("roses.png", x=2, y=6, width=6, height=10)
        self.vector = build_vector([self.text, self.artwork])

    def test_output_is_deterministic(self):
        self.assertEqual(svg_bytes(self.vector), svg_bytes(self.vector))

    def test_document_in_inches(self):
        """The viewBox is the real-world size."""
        data = svg_bytes(self.vector)
        self.assertTrue(data.startswith(b"<?xml"))
        root = ET.fromstring(data)
        self.assertEqual(root.get('width'), '60in')
        self.assertEqual(root.get('height'), '26in')
        self.assertEqual(root.get('viewBox'), '0 0 60 26')

    def test_layer_groups(self):
        """Each vector layer becomes an Inkscape layer, in order."""
        root = ET.fromstring(svg_bytes(self.vector))
        layers = [g for g in root.findall(f'{{{SVG_NS}}}g')
                  if g.get(f'{{{INKSCAPE_NS}}}groupmode') == 'layer']
        self.assertEqual([g.get('id') for g in layers], ['outline', 'text', 'artwork'])

        outline, text, artwork = layers
        self.assertEqual(len(outline.findall(f'{{{SVG_NS}}}rect')), 2)

        run = text.find(f'{{{SVG_NS}}}g')
        self.assertEqual(run.get('transform'), 'translate(12 4) rotate(30)')
        self.assertEqual(run.find(f'{{{SVG_NS}}}title').text, 'Rest')
        self.assertEqual(run.find(f'{{{SVG_NS}}}path').get('d').count('M '), 4)

        image = artwork.find(f'{{{SVG_NS}}}image')
        self.assertEqual(image.get(f'{{{XLINK_NS}}}href'), 'roses.png')
        self.assertEqual(image.get('width'), '6')


if __name__ == '__main__':
    unittest.main()
