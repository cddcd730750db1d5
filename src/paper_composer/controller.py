"""
Module: paper_composer.controller

Purpose:
    Orchestrate the rendering pipelines for one exam document.
    Preview: Compose → Paginate
    PDF:     Compose → Paginate → Render
    DOCX:    Normalize → Format → Assemble

Key Functions:
    - compose_preview(): Paginated print layout for a document
    - export_pdf(): Print rendering as PDF bytes (optionally written)
    - export_docx(): Word document bytes (optionally written)
    - export_layout(): JSON layout tree (optionally written)

Key Classes:
    - ExportResult: Complete export result
    - ExportError: Exception for export failures

Dependencies:
    - layout: Composition and pagination
    - output: PDF and DOCX rendering

Used By:
    - paper_composer.cli: Command line integration
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from paper_composer.core.models import ExamDocument, get_profile

from .layout import LayoutConfig, LayoutResult, compose_document, paginate, resolve_fonts
from .output import build_docx, docx_filename, render_pdf_bytes

logger = logging.getLogger(__name__)

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PDF_MEDIA_TYPE = "application/pdf"
JSON_MEDIA_TYPE = "application/json"


class ExportError(Exception):
    """Error while assembling or writing an export."""
    pass


@dataclass(frozen=True)
class ExportResult:
    """
    Complete export result (immutable).

    Attributes:
        filename: Suggested download filename
        data: Complete file content
        media_type: MIME type of data
        path: Where the file was written (None when not written)
        page_count: Printed pages (PDF and layout exports only)
        warnings: Any warnings raised during pagination

    Example:
        >>> result = export_docx(doc)
        >>> result.filename
        'Physics_Professional.docx'
    """
    filename: str
    data: bytes
    media_type: str
    path: Optional[Path] = None
    page_count: int = 0
    warnings: tuple[str, ...] = ()


def compose_preview(
    document: ExamDocument,
    config: Optional[LayoutConfig] = None,
) -> LayoutResult:
    """
    Build the paginated print layout for a document.

    Args:
        document: Document to lay out (read only)
        config: Layout configuration (defaults to A4)

    Returns:
        LayoutResult carrying the active script profile and fonts
    """
    config = config or LayoutConfig()
    profile = get_profile(document.language)
    fonts = resolve_fonts(profile)

    blocks = compose_document(document, config, fonts)
    return paginate(blocks, config, profile, fonts)


def export_pdf(
    document: ExamDocument,
    output_dir: Optional[Path] = None,
    *,
    config: Optional[LayoutConfig] = None,
    show_footer: bool = True,
) -> ExportResult:
    """
    Render the print layout of a document to PDF.

    Args:
        document: Document to export
        output_dir: Directory to write into (None keeps the bytes in memory)
        config: Layout configuration
        show_footer: Draw the credit line on every page

    Returns:
        ExportResult with the PDF bytes

    Raises:
        ExportError: If composing, rendering or writing fails
    """
    start_time = time.perf_counter()
    config = config or LayoutConfig()
    try:
        layout = compose_preview(document, config)
        data = render_pdf_bytes(layout, config=config, show_footer=show_footer, title=document.title)
    except Exception as e:
        raise ExportError(f"Failed to render PDF: {e}") from e

    filename = export_filename(document.subject, ".pdf")
    path = _write_output(output_dir, filename, data)
    logger.info(f"PDF export completed in {time.perf_counter() - start_time:.2f}s ({layout.page_count} pages)")

    return ExportResult(
        filename=filename,
        data=data,
        media_type=PDF_MEDIA_TYPE,
        path=path,
        page_count=layout.page_count,
        warnings=tuple(layout.warnings),
    )


def export_docx(document: ExamDocument, output_dir: Optional[Path] = None) -> ExportResult:
    """
    Assemble the Word document for a document.

    Nothing is written unless assembly completed. A failed attempt can be
    retried as a whole.

    Args:
        document: Document to export
        output_dir: Directory to write into (None keeps the bytes in memory)

    Returns:
        ExportResult with the DOCX bytes

    Raises:
        ExportError: If assembly or writing fails
    """
    try:
        data = build_docx(document)
    except Exception as e:
        raise ExportError(f"Failed to assemble DOCX: {e}") from e

    filename = docx_filename(document.subject)
    path = _write_output(output_dir, filename, data)
    return ExportResult(filename=filename, data=data, media_type=DOCX_MEDIA_TYPE, path=path)


def export_layout(
    document: ExamDocument,
    output_dir: Optional[Path] = None,
    *,
    config: Optional[LayoutConfig] = None,
) -> ExportResult:
    """Serialize the paginated layout tree as JSON."""
    try:
        layout = compose_preview(document, config)
        data = json.dumps(layout.to_dict(), ensure_ascii=False, indent=2).encode("utf-8")
    except Exception as e:
        raise ExportError(f"Failed to compose layout: {e}") from e

    filename = export_filename(document.subject, ".layout.json")
    path = _write_output(output_dir, filename, data)
    return ExportResult(
        filename=filename,
        data=data,
        media_type=JSON_MEDIA_TYPE,
        path=path,
        page_count=layout.page_count,
        warnings=tuple(layout.warnings),
    )


def export_filename(subject: str, extension: str) -> str:
    """
    Filename for a non-DOCX export, sharing the DOCX naming rule.

    Example:
        >>> export_filename("Physics Paper", ".pdf")
        'Physics_Paper_Professional.pdf'
    """
    return docx_filename(subject)[: -len(".docx")] + extension


def _write_output(output_dir: Optional[Path], filename: str, data: bytes) -> Optional[Path]:
    """Write finished export bytes; returns the path or None."""
    if output_dir is None:
        return None
    path = Path(output_dir) / filename
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as e:
        raise ExportError(f"Failed to write {path}: {e}") from e
    logger.info(f"Wrote {path} ({len(data)} bytes)")
    return path
