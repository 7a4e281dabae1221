"""
Tests for catalog records and repositories.
"""

import os
import unittest

from memorialcraft.core import (
    EditZone, Font, FontCatalog, InvalidGeometry, InvalidReference,
    Material, MaterialCatalog, Rect, Template, TemplateCatalog, load_catalogs
)
from tests.helpers import make_template

SAMPLE_CATALOG = os.path.join(os.path.dirname(__file__), '..', '..', 'data', 'sample_catalog.json')


class TestTemplate(unittest.TestCase):
    """Test Template records."""

    def test_from_stored_record(self):
        """camelCase product records are accepted."""
        template = Template.from_dict({
            'id': 'template-001',
            'name': 'Estate Collection 1',
            'productCategory': 'Estate Collection',
            'realWorldWidth': 60,
            'realWorldHeight': 26,
            'canvasWidth': 1200,
            'canvasHeight': 520,
            'availableMaterials': ['mat-001', 'mat-002'],
            'defaultMaterialId': 'mat-002',
            'editZones': [{'id': 'main-zone', 'x': 10, 'y': 2.5, 'width': 40, 'height': 15.5}],
            'floral': [{'id': 'floral1', 'imageUrl': 'floral1.png',
                        'x': 0, 'y': 5, 'width': 9, 'height': 13}],
            'productBase': [{'id': 'default-base', 'x': 0, 'y': 23,
                             'width': 60, 'height': 3, 'material': 'mat-006'}],
        })
        self.assertEqual(template.category, 'Estate Collection')
        self.assertEqual(template.canvas_width, 1200.0)
        self.assertEqual(template.edit_zones[0].rect, Rect(10, 2.5, 40, 15.5))
        self.assertEqual(template.decorative_slots[0].image_ref, 'floral1.png')
        self.assertEqual(template.base_regions[0].material_id, 'mat-006')
        self.assertTrue(template.permits_material('mat-001'))
        self.assertFalse(template.permits_material('mat-006'))
        template.validate()

    def test_zone_outside_template_rejected(self):
        """Rectangles must lie inside the real-world extent."""
        template = make_template(edit_zones=(EditZone('wide', Rect(30, 0, 40, 10)),))
        with self.assertRaises(InvalidGeometry):
            template.validate()

    def test_non_positive_size_rejected(self):
        """Non-positive real-world size is invalid."""
        with self.assertRaises(InvalidGeometry):
            make_template(real_world_height=0).validate()
        with self.assertRaises(InvalidGeometry):
            TemplateCatalog([make_template(canvas_width=-5)])

    def test_default_material_must_be_permitted(self):
        """The default material is one of the available materials."""
        with self.assertRaises(InvalidReference):
            make_template(default_material_id='mat-006').validate()


class TestCatalogs(unittest.TestCase):
    """Test catalog lookups."""

    def setUp(self):
        self.fonts = FontCatalog([
            Font('arial', 'Arial', 'Arial.ttf', 'sans-serif'),
            Font('georgia', 'Georgia', 'Georgia.ttf', 'serif'),
            Font('times', 'Times New Roman', 'Times New Roman.ttf', 'serif'),
        ])

    def test_font_lookup_by_family(self):
        """Fonts are found by family name, not id."""
        self.assertEqual(self.fonts.get_by_family('Georgia').id, 'georgia')
        self.assertIsNone(self.fonts.get_by_family('georgia'))
        self.assertEqual(self.fonts.source_map()['Times New Roman'], 'Times New Roman.ttf')

    def test_list_by_category(self):
        """Records can be listed by category."""
        serif = self.fonts.list_by_category('serif')
        self.assertEqual([f.id for f in serif], ['georgia', 'times'])

    def test_missing_reference_fails_closed(self):
        """require() raises InvalidReference for unknown ids."""
        materials = MaterialCatalog([Material('mat-001', 'Black Granite')])
        self.assertIsNone(materials.get_by_id('mat-999'))
        with self.assertRaises(InvalidReference) as ctx:
            materials.require('mat-999')
        self.assertEqual(ctx.exception.kind, 'material')
        self.assertEqual(ctx.exception.ref_id, 'mat-999')

    def test_duplicate_ids_keep_first(self):
        """The first record with an id wins."""
        materials = MaterialCatalog([Material('m', 'First'), Material('m', 'Second')])
        self.assertEqual(len(materials), 1)
        self.assertEqual(materials.require('m').name, 'First')

    def test_material_is_immutable(self):
        """Materials are frozen."""
        material = Material('mat-001', 'Black Granite')
        with self.assertRaises(AttributeError):
            material.name = 'Changed'

    def test_load_sample_catalog(self):
        """The sample catalog file loads and validates."""
        catalogs = load_catalogs(SAMPLE_CATALOG)
        self.assertEqual(len(catalogs.templates), 3)
        self.assertEqual(catalogs.templates.require('template-002').default_material_id, 'mat-001')
        self.assertEqual(catalogs.fonts.get_by_family('Brush Script').source, 'Brush Script.ttf')
        self.assertEqual(catalogs.materials.require('mat-002').overlay_fill, '#898989')
        self.assertEqual(len(catalogs.templates.list_by_category('Estate Collection')), 2)


if __name__ == '__main__':
    unittest.main()
