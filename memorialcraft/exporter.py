"""
Export Service for MemorialCraft

Entry points the editor calls on save/export. Each export snapshots the
document's elements first and works only on the snapshot, so the editor
may keep accepting edits for later exports. The coroutines suspend only
at the I/O boundary: the bitmap capture and the byte encoding.
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from .core.catalog import Catalogs, Material, Template
from .core.document import DesignDocument
from .core.elements import DesignElement
from .core.errors import CaptureFailure, MemorialCraftError, UnresolvedFont
from .core.settings import ExportSettings
from .image.rasterizer import DesignRasterizer
from .io.dxf_writer import DXFWriter
from .io.proof_renderer import ProofDocument, ProofRenderer
from .io.svg_writer import svg_bytes
from .io.vector_document import VectorDocument
from .io.vector_export import GlyphOutliner, VectorExporter

logger = logging.getLogger(__name__)

# capture(document, template, material, elements) -> bitmap, or an awaitable of one.
# Captures must use the material and elements they are given, never the live
# document's, which the editor may change while the export runs.
CaptureFunc = Callable[[DesignDocument, Template, Material, List[DesignElement]], Any]

VECTOR_FORMATS = ("dxf", "svg")


@dataclass
class VectorArtifact:
    """Encoded vector export."""
    data: bytes
    format: str
    document: VectorDocument
    warnings: List[UnresolvedFont] = field(default_factory=list)


@dataclass
class ExportJob:
    """A validated, snapshotted export input."""
    document: DesignDocument
    template: Template
    material: Material
    elements: List[DesignElement]


class ExportService:
    """
    Runs vector and proof exports against injected catalogs.

    The caller guarantees at most one export in flight per document.
    There is no cancellation: an abandoned export still runs to the end.
    """

    def __init__(self, catalogs: Catalogs,
                 settings: Optional[ExportSettings] = None,
                 outliner: Optional[GlyphOutliner] = None,
                 capture: Optional[CaptureFunc] = None,
                 assets_dir: Optional[str] = None):
        self.catalogs = catalogs
        self.settings = settings or ExportSettings()
        is_valid, error = self.settings.validate()
        if not is_valid:
            raise ValueError(f"Invalid export settings: {error}")
        self.vector_exporter = VectorExporter(catalogs.fonts, self.settings, outliner)
        self.proof_renderer = ProofRenderer(self.settings)
        if capture is None:
            rasterizer = DesignRasterizer(catalogs, self.settings, assets_dir)

            def capture(document, template, material, elements):
                return rasterizer.render(document, template, elements, material)
        self._capture = capture

    def prepare(self, document: DesignDocument) -> ExportJob:
        """
        Resolve references and snapshot the elements.

        Raises:
            InvalidReference: missing template or material
            InvalidGeometry: template with non-positive dimensions
        """
        template, material = document.validate(self.catalogs.templates, self.catalogs.materials)
        template.validate()
        return ExportJob(document=document, template=template, material=material,
                         elements=document.snapshot())

    def build_vector(self, document: DesignDocument) -> VectorArtifact:
        """Synchronous vector build without encoding; format is left empty."""
        job = self.prepare(document)
        result = self.vector_exporter.export(job.document, job.template, job.elements)
        return VectorArtifact(data=b"", format="", document=result.document,
                              warnings=result.warnings)

    def encode(self, vector_doc: VectorDocument, fmt: str) -> bytes:
        if fmt == "dxf":
            return DXFWriter(self.settings.dxf_version, self.settings.precision).to_bytes(vector_doc)
        if fmt == "svg":
            return svg_bytes(vector_doc, self.settings.precision)
        raise ValueError(f"Unknown vector format {fmt!r}, expected one of {VECTOR_FORMATS}")

    async def export_vector(self, document: DesignDocument, fmt: str = "dxf") -> VectorArtifact:
        """
        Export the document's cut/engrave file.

        Font fallbacks are reported in ``warnings``; missing template or
        material references fail the whole export.
        """
        if fmt not in VECTOR_FORMATS:
            raise ValueError(f"Unknown vector format {fmt!r}, expected one of {VECTOR_FORMATS}")
        artifact = self.build_vector(document)
        artifact.data = await asyncio.to_thread(self.encode, artifact.document, fmt)
        artifact.format = fmt
        for warning in artifact.warnings:
            logger.warning(str(warning))
        logger.info(f"Exported {fmt.upper()} for document {document.id} ({len(artifact.data)} bytes)")
        return artifact

    async def _run_capture(self, job: ExportJob):
        try:
            if inspect.iscoroutinefunction(self._capture):
                return await self._capture(job.document, job.template, job.material, job.elements)
            result = await asyncio.to_thread(self._capture, job.document, job.template,
                                           job.material, job.elements)
            if inspect.isawaitable(result):
                result = await result
            return result
        except MemorialCraftError:
            raise
        except Exception as e:
            logger.error(f"Capture failed for document {job.document.id}: {e}")
            raise CaptureFailure(f"Could not capture document {job.document.id}: {e}") from e

    async def export_proof(self, document: DesignDocument,
                           title: Optional[str] = None) -> ProofDocument:
        """
        Export the paginated approval proof.

        Raises:
            CaptureFailure: the capture collaborator failed (not retried)
            InvalidGeometry: the captured bitmap is empty
        """
        job = self.prepare(document)
        bitmap = await self._run_capture(job)
        if bitmap is None:
            raise CaptureFailure(f"Capture returned no bitmap for document {document.id}")
        return await asyncio.to_thread(self.proof_renderer.render, bitmap,
                                       title or f"{document.title} - Approval Proof")
