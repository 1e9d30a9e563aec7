"""
PDF processing service for extracting positioned text fragments from PDF files.
"""

import PyPDF2
from io import BytesIO
from typing import List

from ..errors import ExtractionError
from ..models import Fragment, Page
from ..utils import (
    measure_time,
    log_processing_info,
    handle_processing_error
)
import logging

logger = logging.getLogger(__name__)


class PDFProcessor:
    """Service for processing PDF files and extracting text."""

    @staticmethod
    def _extract_page_fragments(page) -> List[Fragment]:
        """
        Collect the text fragments of a page in content stream order.

        PyPDF2 reports each text show operation to the visitor together with
        the current text matrix; its last two entries are the origin.
        """
        fragments: List[Fragment] = []

        def visitor(text, cm, tm, font_dict, font_size):
            if not text:
                return
            x = y = None
            if tm is not None and len(tm) >= 6:
                x, y = float(tm[4]), float(tm[5])
            fragments.append(Fragment(text=text, x=x, y=y))

        page.extract_text(visitor_text=visitor)
        return fragments

    @measure_time
    def extract_pages(self, file_content: bytes, filename: str) -> List[Page]:
        """
        Extract text fragments from PDF file content.

        Args:
            file_content: PDF file content as bytes
            filename: Name of the PDF file

        Returns:
            List of Page objects, one per PDF page

        Raises:
            ExtractionError: If the PDF cannot be parsed
        """
        if not file_content:
            raise ExtractionError(f"PDF {filename} is empty")

        try:
            pdf_reader = PyPDF2.PdfReader(BytesIO(file_content))
            total_pages = len(pdf_reader.pages)

            log_processing_info("PDF extraction started", {
                "filename": filename,
                "total_pages": total_pages,
                "file_size": len(file_content)
            })

            pages = [
                Page(number=page_num + 1, fragments=self._extract_page_fragments(page))
                for page_num, page in enumerate(pdf_reader.pages)
            ]

        except Exception as e:
            error_info = handle_processing_error(
                "pdf_extraction",
                e,
                {"filename": filename, "file_size": len(file_content)}
            )
            raise ExtractionError(
                f"Failed to extract text from PDF {filename}: {error_info['error_message']}"
            ) from e

        log_processing_info("PDF extraction completed", {
            "filename": filename,
            "total_pages": total_pages,
            "fragments": sum(len(page.fragments) for page in pages)
        })

        return pages
