"""
MemorialCraft Design Document

The DesignDocument is the root container for one customer composition:
a template reference, a selected material and the ordered design elements.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterable, List, Optional, Tuple
from uuid import uuid4

from .catalog import Material, MaterialCatalog, Template, TemplateCatalog
from .elements import DesignElement
from .errors import InvalidReference, InvalidState

logger = logging.getLogger(__name__)


class DocumentStatus(Enum):
    """Lifecycle of a design document."""
    DRAFT = "draft"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    APPROVED = "approved"


# Approved is terminal
_TRANSITIONS = {
    DocumentStatus.DRAFT: {DocumentStatus.IN_PROGRESS, DocumentStatus.COMPLETED},
    DocumentStatus.IN_PROGRESS: {DocumentStatus.DRAFT, DocumentStatus.COMPLETED},
    DocumentStatus.COMPLETED: {DocumentStatus.IN_PROGRESS, DocumentStatus.APPROVED},
    DocumentStatus.APPROVED: set(),
}


def _now() -> str:
    return datetime.now().isoformat()


class DesignDocument:
    """
    One template, one material and an ordered sequence of design elements.

    The template is referenced by id and never copied. Sequence order is the
    z-order and the export order. Once the document is approved, the
    element sequence and material selection are frozen and every mutating
    call raises InvalidState.
    """

    def __init__(self, template_id: str, material_id: str = "",
                 title: str = "Untitled",
                 elements: Optional[Iterable[DesignElement]] = None,
                 status: DocumentStatus = DocumentStatus.DRAFT,
                 id: Optional[str] = None,
                 created_at: str = "", modified_at: str = "",
                 approved_at: str = ""):
        self.id: str = id or str(uuid4())
        self.title = title
        self.template_id = template_id
        self._material_id = material_id
        self._elements: List[DesignElement] = list(elements or [])
        self._status = status
        self.created_at = created_at or _now()
        self.modified_at = modified_at or self.created_at
        self.approved_at = approved_at

    @classmethod
    def from_template(cls, template: Template, title: str = "Untitled") -> 'DesignDocument':
        """Start a new document on a template with its default material."""
        return cls(template_id=template.id, material_id=template.default_material_id,
                   title=title)

    # -- read access ---------------------------------------------------

    @property
    def status(self) -> DocumentStatus:
        return self._status

    @property
    def material_id(self) -> str:
        return self._material_id

    @property
    def elements(self) -> Tuple[DesignElement, ...]:
        """The element sequence; mutate through the document's methods."""
        return tuple(self._elements)

    @property
    def is_approved(self) -> bool:
        return self._status is DocumentStatus.APPROVED

    def __len__(self) -> int:
        return len(self._elements)

    def get_element_by_id(self, element_id: str) -> Optional[DesignElement]:
        for element in self._elements:
            if element.element_id == element_id:
                return element
        return None

    def snapshot(self) -> List[DesignElement]:
        """Deep copy of the element sequence, for exports."""
        return [element.clone() for element in self._elements]

    # -- mutation ------------------------------------------------------

    def _check_editable(self, action: str) -> None:
        if self.is_approved:
            raise InvalidState(
                f"Document {self.id} is approved; cannot {action}")

    def _touch(self) -> None:
        self.modified_at = _now()

    def add_element(self, element: DesignElement) -> None:
        """Append an element on top of the z-order."""
        self._check_editable("add elements")
        self._elements.append(element)
        self._touch()

    def insert_element(self, index: int, element: DesignElement) -> None:
        self._check_editable("insert elements")
        self._elements.insert(index, element)
        self._touch()

    def remove_element(self, element_id: str) -> DesignElement:
        """Remove an element by id and return it."""
        self._check_editable("remove elements")
        element = self.get_element_by_id(element_id)
        if element is None:
            raise InvalidReference("element", element_id)
        self._elements.remove(element)
        self._touch()
        return element

    def replace_element(self, element: DesignElement) -> None:
        """Replace the element with the same id, keeping its position in the sequence."""
        self._check_editable("edit elements")
        for idx, existing in enumerate(self._elements):
            if existing.element_id == element.element_id:
                self._elements[idx] = element
                self._touch()
                return
        raise InvalidReference("element", element.element_id)

    def move_element_up(self, element_id: str) -> None:
        """Move element up in the z-order."""
        self._check_editable("reorder elements")
        element = self.get_element_by_id(element_id)
        if element is None:
            raise InvalidReference("element", element_id)
        idx = self._elements.index(element)
        if idx < len(self._elements) - 1:
            self._elements[idx], self._elements[idx + 1] = \
                self._elements[idx + 1], self._elements[idx]
            self._touch()

    def move_element_down(self, element_id: str) -> None:
        """Move element down in the z-order."""
        self._check_editable("reorder elements")
        element = self.get_element_by_id(element_id)
        if element is None:
            raise InvalidReference("element", element_id)
        idx = self._elements.index(element)
        if idx > 0:
            self._elements[idx], self._elements[idx - 1] = \
                self._elements[idx - 1], self._elements[idx]
            self._touch()

    def clear_elements(self) -> None:
        self._check_editable("clear elements")
        self._elements.clear()
        self._touch()

    def set_material(self, material_id: str, template: Optional[Template] = None) -> None:
        """
        Select a material.

        When the template is given, the material must be one it permits.
        """
        self._check_editable("change material")
        if template is not None and not template.permits_material(material_id):
            raise InvalidReference("material", material_id,
                                   f"not permitted by template {template.id!r}")
        self._material_id = material_id
        self._touch()

    def set_status(self, status: DocumentStatus) -> None:
        """Move to another lifecycle status."""
        if status is self._status:
            return
        if status not in _TRANSITIONS[self._status]:
            raise InvalidState(
                f"Cannot move document {self.id} from {self._status.value} to {status.value}")
        self._status = status
        if status is DocumentStatus.APPROVED:
            self.approved_at = _now()
            logger.info(f"Document {self.id} approved")
        self._touch()

    def approve(self) -> None:
        """Approve the design; the document is frozen afterwards."""
        if self._status in (DocumentStatus.DRAFT, DocumentStatus.IN_PROGRESS):
            self.set_status(DocumentStatus.COMPLETED)
        self.set_status(DocumentStatus.APPROVED)

    # -- references ----------------------------------------------------

    def validate(self, templates: TemplateCatalog,
                 materials: MaterialCatalog) -> Tuple[Template, Material]:
        """
        Resolve the template and material references.

        Raises:
            InvalidReference: a reference is missing or the material is not
                permitted by the template
        """
        template = templates.require(self.template_id)
        material = materials.require(self._material_id)
        if not template.permits_material(material.id):
            raise InvalidReference("material", material.id,
                                   f"not permitted by template {template.id!r}")
        return template, material


@dataclass(frozen=True)
class ArtworkTemplate:
    """
    A saved, reusable composition.

    Holds a snapshot of a document's elements, never a live reference.
    Deleting it has no effect on documents built from it.
    """
    name: str
    elements: Tuple[DesignElement, ...]
    preview_ref: str = ""
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: str = field(default_factory=_now)

    @classmethod
    def capture(cls, document: DesignDocument, name: str,
                preview_ref: str = "") -> 'ArtworkTemplate':
        """Snapshot a live document's elements."""
        return cls(name=name, elements=tuple(document.snapshot()),
                   preview_ref=preview_ref)

    def apply_to(self, document: DesignDocument) -> List[DesignElement]:
        """
        Append copies of the captured elements to a document.

        Each copy gets a fresh element id so the same artwork template can
        be applied more than once.
        """
        added = []
        for element in self.elements:
            copy = element.clone(new_id=True)
            document.add_element(copy)
            added.append(copy)
        return added
