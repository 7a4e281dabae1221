"""
Design Document File I/O for MemorialCraft

Converts DesignDocuments and ArtworkTemplates to and from plain dicts, and
saves/loads them as JSON files. Only the template id is stored, never a
copy of the template.
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from ..core.document import ArtworkTemplate, DesignDocument, DocumentStatus
from ..core.elements import ArtworkElement, DesignElement, TextElement

logger = logging.getLogger(__name__)

FORMAT_VERSION = '1.0'


def save_document(document: DesignDocument, filepath: str) -> None:
    """
    Save a document to a JSON file.

    Args:
        document: The document to save
        filepath: Path to save the file
    """
    doc_dict = document_to_dict(document)
    doc_dict['version'] = FORMAT_VERSION
    doc_dict['saved_at'] = datetime.now().isoformat()

    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(doc_dict, f, indent=2, ensure_ascii=False)
    logger.info(f"Saved document {document.id} to {filepath}")


def load_document(filepath: str) -> DesignDocument:
    """
    Load a document from a JSON file.

    Args:
        filepath: Path to the document file

    Returns:
        The loaded DesignDocument
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        doc_dict = json.load(f)
    return dict_to_document(doc_dict)


def document_to_dict(document: DesignDocument) -> Dict[str, Any]:
    """Convert DesignDocument to dictionary."""
    return {
        'id': document.id,
        'title': document.title,
        'template_id': document.template_id,
        'material_id': document.material_id,
        'status': document.status.value,
        'created_at': document.created_at,
        'modified_at': document.modified_at,
        'approved_at': document.approved_at,
        'elements': [element_to_dict(e) for e in document.elements]
    }


def dict_to_document(doc_dict: Dict[str, Any]) -> DesignDocument:
    """Convert dictionary to DesignDocument."""
    try:
        status = DocumentStatus(doc_dict.get('status', 'draft'))
    except ValueError:
        logger.warning(f"Unknown status {doc_dict.get('status')!r}, loading as draft")
        status = DocumentStatus.DRAFT

    elements = []
    for element_dict in doc_dict.get('elements', []):
        element = dict_to_element(element_dict)
        if element is not None:
            elements.append(element)

    return DesignDocument(
        id=doc_dict.get('id'),
        title=doc_dict.get('title', 'Untitled'),
        template_id=doc_dict.get('template_id', doc_dict.get('templateId', '')),
        material_id=doc_dict.get('material_id', doc_dict.get('materialId', '')),
        elements=elements,
        status=status,
        created_at=doc_dict.get('created_at', ''),
        modified_at=doc_dict.get('modified_at', ''),
        approved_at=doc_dict.get('approved_at', '')
    )


def element_to_dict(element: DesignElement) -> Dict[str, Any]:
    """Convert a design element to dictionary."""
    base = {
        'type': element.kind,
        'element_id': element.element_id,
        'x': element.x,
        'y': element.y,
        'rotation': element.rotation
    }

    if isinstance(element, TextElement):
        base.update({
            'content': element.content,
            'font_family': element.font_family,
            'font_size': element.font_size,
            'color': element.color
        })
    elif isinstance(element, ArtworkElement):
        base.update({
            'image_ref': element.image_ref,
            'width': element.width,
            'height': element.height
        })
    return base


def dict_to_element(element_dict: Dict[str, Any]) -> Optional[DesignElement]:
    """Convert dictionary to a design element; None for unknown types."""
    element_type = element_dict.get('type')
    common = {
        'x': float(element_dict.get('x', 0.0)),
        'y': float(element_dict.get('y', 0.0)),
        'rotation': float(element_dict.get('rotation', 0.0)),
    }
    if element_dict.get('element_id'):
        common['element_id'] = element_dict['element_id']

    if element_type == 'text':
        return TextElement(
            content=element_dict.get('content', ''),
            font_family=element_dict.get('font_family', ''),
            font_size=float(element_dict.get('font_size', 1.0)),
            color=element_dict.get('color', '#000000'),
            **common
        )
    elif element_type == 'artwork':
        return ArtworkElement(
            image_ref=element_dict.get('image_ref', ''),
            width=float(element_dict.get('width', 1.0)),
            height=float(element_dict.get('height', 1.0)),
            **common
        )

    logger.warning(f"Skipping element of unknown type {element_type!r}")
    return None


def artwork_template_to_dict(artwork: ArtworkTemplate) -> Dict[str, Any]:
    return {
        'id': artwork.id,
        'name': artwork.name,
        'preview_ref': artwork.preview_ref,
        'created_at': artwork.created_at,
        'elements': [element_to_dict(e) for e in artwork.elements]
    }


def dict_to_artwork_template(artwork_dict: Dict[str, Any]) -> ArtworkTemplate:
    elements = tuple(e for e in (dict_to_element(d) for d in artwork_dict.get('elements', []))
                     if e is not None)
    kwargs = {}
    if artwork_dict.get('id'):
        kwargs['id'] = artwork_dict['id']
    if artwork_dict.get('created_at'):
        kwargs['created_at'] = artwork_dict['created_at']
    return ArtworkTemplate(
        name=artwork_dict.get('name', ''),
        elements=elements,
        preview_ref=artwork_dict.get('preview_ref', ''),
        **kwargs
    )
