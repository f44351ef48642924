"""Output generation for dashboard snapshots (text, PDF)."""

from careshift.output.pdf_generator import PDFGenerator
from careshift.output.text_report import TextReportGenerator

__all__ = [
    "PDFGenerator",
    "TextReportGenerator",
]
