"""
Document parsing task using pypdf.

Extracts the text layer of every page and the page count from PDF bytes.
Scanned PDFs without a text layer are reported as empty (no OCR).

Dependencies: pypdf
System role: Parsing stage of document ingestion pipeline
"""

import io
import logging

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from pdf_rag.core.exceptions import EmptyDocumentError, ParsingError

from ..models import ExtractedDocument

logger = logging.getLogger(__name__)

PAGE_SEPARATOR = "\n\n"


class PdfParsingTask:
    """Parse PDF bytes into plain text."""

    def parse(self, data: bytes) -> ExtractedDocument:
        """
        Extract text and page count.

        Args:
            data: Raw PDF bytes

        Returns:
            ExtractedDocument: Joined page text and page count

        Raises:
            ParsingError: Bytes are not a readable PDF
            EmptyDocumentError: PDF has no extractable text
        """
        if not data:
            raise ParsingError("PDF is empty")

        try:
            reader = PdfReader(io.BytesIO(data))
            if reader.is_encrypted and not reader.decrypt(""):
                raise ParsingError("PDF is encrypted")
            pages = [page.extract_text() or "" for page in reader.pages]
        except ParsingError:
            raise
        except PdfReadError as e:
            raise ParsingError(f"Invalid PDF: {e}") from e
        except Exception as e:
            raise ParsingError(f"Failed to parse PDF: {e}") from e

        text = PAGE_SEPARATOR.join(page.strip() for page in pages if page.strip())
        if not text:
            raise EmptyDocumentError(
                "PDF document contains no extractable text",
                details={"page_count": len(pages)},
            )

        logger.info(
            f"{__name__}:parse - Extracted text",
            extra={"page_count": len(pages), "char_count": len(text)},
        )
        return ExtractedDocument(text=text, page_count=len(pages))
