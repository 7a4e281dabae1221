"""
Shared test fixtures: small catalogs and a deterministic glyph outliner.
"""

from memorialcraft.core import (
    BaseRegion, Catalogs, DecorativeSlot, EditZone, Font, FontCatalog,
    Material, MaterialCatalog, Point, Rect, Template, TemplateCatalog
)


class FakeOutliner:
    """One unit square per visible character, 0.6 em advance."""

    def __init__(self):
        self.calls = []

    def outline(self, text, source, size):
        self.calls.append((text, source, size))
        paths = []
        pen_x = 0.0
        for ch in text:
            if not ch.isspace():
                paths.append([
                    Point(pen_x, 0.0), Point(pen_x + 0.5 * size, 0.0),
                    Point(pen_x + 0.5 * size, size), Point(pen_x, size),
                    Point(pen_x, 0.0)
                ])
            pen_x += 0.6 * size
        return paths


def make_template(**overrides):
    fields = dict(
        id='template-001',
        name='Estate Collection 1',
        category='Estate Collection',
        real_world_width=60.0,
        real_world_height=26.0,
        canvas_width=1200.0,
        canvas_height=520.0,
        edit_zones=(EditZone('main-zone', Rect(10, 2.5, 40, 15.5)),),
        decorative_slots=(DecorativeSlot('floral1', 'floral/floral1.png', Rect(0, 5, 9, 13)),),
        base_regions=(BaseRegion(Rect(0, 23, 60, 3), 'mat-006', id='default-base'),),
        available_materials=('mat-001', 'mat-002'),
        default_material_id='mat-002',
    )
    fields.update(overrides)
    return Template(**fields)


def make_catalogs(templates=None):
    return Catalogs(
        templates=TemplateCatalog(templates or [make_template()]),
        fonts=FontCatalog([
            Font('arial', 'Arial', 'Arial.ttf', 'sans-serif'),
            Font('times-new-roman', 'Times New Roman', 'Times New Roman.ttf', 'serif'),
            Font('brush-script', 'Brush Script', 'BrushScript.ttf', 'script'),
        ]),
        materials=MaterialCatalog([
            Material('mat-001', 'Black Granite', overlay_fill='#101010'),
            Material('mat-002', 'Grey Granite', overlay_fill='#898989'),
            Material('mat-006', 'Base'),
        ])
    )
