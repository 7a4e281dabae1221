"""
SVG Writer for MemorialCraft

Serialises a VectorDocument to SVG. Units are inches (the viewBox is the
template's real-world size) and each vector layer becomes an Inkscape
layer group.
"""

import xml.etree.ElementTree as ET
from typing import List

from ..core.geometry import Point
from .vector_document import (
    ArtworkEntity, OutlineEntity, TextEntity, VectorDocument, VectorLayer
)

INKSCAPE_NS = "http://www.inkscape.org/namespaces/inkscape"
XLINK_NS = "http://www.w3.org/1999/xlink"


def _fmt(value: float, precision: int) -> str:
    """Fixed-precision number without trailing zeros."""
    text = f"{value:.{precision}f}".rstrip('0').rstrip('.')
    return "0" if text in ("", "-0") else text


def _path_data(paths: List[List[Point]], precision: int) -> str:
    commands = []
    for path_points in paths:
        if not path_points:
            continue
        d = f'M {_fmt(path_points[0].x, precision)},{_fmt(path_points[0].y, precision)}'
        for point in path_points[1:]:
            d += f' L {_fmt(point.x, precision)},{_fmt(point.y, precision)}'
        commands.append(d + ' Z')
    return ' '.join(commands)


def _write_layer(svg: ET.Element, layer: VectorLayer, precision: int) -> None:
    g = ET.SubElement(svg, 'g')
    g.set('id', layer.name)
    g.set('inkscape:groupmode', 'layer')
    g.set('inkscape:label', layer.name)
    g.set('stroke', layer.color)
    g.set('stroke-width', '0.01')
    g.set('fill', 'none')

    for entity in layer.entities:
        if isinstance(entity, OutlineEntity):
            rect = ET.SubElement(g, 'rect')
            rect.set('id', f'{layer.name}-{entity.name}')
            rect.set('data-kind', entity.kind)
            rect.set('x', _fmt(entity.rect.x, precision))
            rect.set('y', _fmt(entity.rect.y, precision))
            rect.set('width', _fmt(entity.rect.width, precision))
            rect.set('height', _fmt(entity.rect.height, precision))
        elif isinstance(entity, TextEntity):
            text_group = ET.SubElement(g, 'g')
            text_group.set('id', f'text-{entity.name}')
            text_group.set('data-font-family', entity.font_family)
            text_group.set('data-font-size', _fmt(entity.height, precision))
            transform = (f'translate({_fmt(entity.insert.x, precision)} '
                         f'{_fmt(entity.insert.y, precision)})')
            if entity.rotation:
                transform += f' rotate({_fmt(entity.rotation, precision)})'
            text_group.set('transform', transform)
            title = ET.SubElement(text_group, 'title')
            title.text = entity.content
            d = _path_data(entity.glyph_paths, precision)
            if d:
                path_elem = ET.SubElement(text_group, 'path')
                path_elem.set('d', d)
        elif isinstance(entity, ArtworkEntity):
            image = ET.SubElement(g, 'image')
            image.set('id', f'artwork-{entity.name}')
            image.set('xlink:href', entity.image_ref)
            image.set('x', _fmt(entity.rect.x, precision))
            image.set('y', _fmt(entity.rect.y, precision))
            image.set('width', _fmt(entity.rect.width, precision))
            image.set('height', _fmt(entity.rect.height, precision))
            image.set('preserveAspectRatio', 'none')
            if entity.rotation:
                image.set('transform',
                          f'rotate({_fmt(entity.rotation, precision)} '
                          f'{_fmt(entity.rect.x, precision)} {_fmt(entity.rect.y, precision)})')


def svg_bytes(document: VectorDocument, precision: int = 4) -> bytes:
    """Serialise a VectorDocument to SVG bytes."""
    svg = ET.Element('svg')
    svg.set('xmlns', 'http://www.w3.org/2000/svg')
    svg.set('xmlns:inkscape', INKSCAPE_NS)
    svg.set('xmlns:xlink', XLINK_NS)
    svg.set('width', f'{_fmt(document.width, precision)}in')
    svg.set('height', f'{_fmt(document.height, precision)}in')
    svg.set('viewBox', f'0 0 {_fmt(document.width, precision)} {_fmt(document.height, precision)}')
    title = ET.SubElement(svg, 'title')
    title.text = document.name

    for layer in document.layers:
        _write_layer(svg, layer, precision)

    tree = ET.ElementTree(svg)
    ET.indent(tree, space="  ")
    return ET.tostring(svg, encoding='utf-8', xml_declaration=True)


def export_svg(document: VectorDocument, filepath: str, precision: int = 4) -> None:
    """Export a VectorDocument to an SVG file."""
    with open(filepath, 'wb') as f:
        f.write(svg_bytes(document, precision))
