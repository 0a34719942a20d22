"""
Extracted document model.

Dependencies: pydantic
System role: Output of the parsing stage
"""

from pydantic import BaseModel, Field


class ExtractedDocument(BaseModel):
    """Plain text and page count pulled out of a PDF."""

    text: str = Field(description="Text of all pages joined by blank lines")
    page_count: int = Field(ge=0, description="Number of pages in the PDF")
