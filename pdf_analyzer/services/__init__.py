"""
Services package for the PDF Analyzer Backend.
"""

from .pdf_processor import PDFProcessor
from .assistant_service import AssistantService
from .analysis_service import AnalysisService
from .text_chunker import chunk_pages
from .run_poller import await_run_completion, backoff_intervals

__all__ = [
    "PDFProcessor",
    "AssistantService",
    "AnalysisService",
    "chunk_pages",
    "await_run_completion",
    "backoff_intervals"
]
