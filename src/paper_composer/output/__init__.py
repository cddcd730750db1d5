"""
Module: output

Purpose:
    File renderers for composed exam papers.
    Print layout -> PDF (ReportLab), document model -> DOCX (python-docx).

Key Functions:
    - render_to_pdf(): Render a paginated layout to a PDF file
    - render_pdf_bytes(): Same, returning bytes
    - build_docx(): Assemble a Word document in memory
    - docx_filename(): Download filename for a subject

Used By:
    - controller: Export pipeline
"""

from .docx_writer import build_docx, docx_filename
from .renderer import render_pdf_bytes, render_to_pdf

__all__ = [
    "render_to_pdf",
    "render_pdf_bytes",
    "build_docx",
    "docx_filename",
]
