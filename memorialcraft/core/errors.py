"""
MemorialCraft Errors

Exceptions raised by the composition and export layers, plus the
non-fatal warning records attached to export results.
"""

from dataclasses import dataclass


class MemorialCraftError(Exception):
    """Base class for all MemorialCraft errors."""


class InvalidReference(MemorialCraftError):
    """A template, material or font id could not be found."""

    def __init__(self, kind: str, ref_id: str, detail: str = ""):
        self.kind = kind
        self.ref_id = ref_id
        message = f"Unknown {kind} reference: {ref_id!r}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class InvalidGeometry(MemorialCraftError):
    """Non-positive dimensions, empty bitmaps or out-of-bounds rectangles."""


class InvalidState(MemorialCraftError):
    """An operation is not allowed in the document's current status."""


class CaptureFailure(MemorialCraftError):
    """The rasterization collaborator failed to produce a bitmap."""


@dataclass(frozen=True)
class UnresolvedFont:
    """
    Warning record for a font family that could not be resolved.

    Export continues with `fallback_family`; the record is attached
    to the export result rather than raised.
    """
    family: str
    fallback_family: str
    element_id: str = ""

    def __str__(self) -> str:
        where = f" in element {self.element_id}" if self.element_id else ""
        if not self.fallback_family:
            return (f"Font '{self.family}'{where} could not be loaded, "
                    f"text exported without outlines")
        return (f"Font '{self.family}'{where} is not available, "
                f"using '{self.fallback_family}'")
