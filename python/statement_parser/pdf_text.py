"""
PDF Text Extraction

Turns PDF bytes into the plain line-oriented text the PDF parsers consume.
"""

import logging
from io import BytesIO

import pdfplumber

from .errors import InvalidUpload

logger = logging.getLogger(__name__)


def extract_text(content: bytes) -> str:
    """Extract text from every page of a PDF.

    Args:
        content: Raw PDF bytes

    Returns:
        Page texts joined with newlines

    Raises:
        InvalidUpload: If the bytes are not a readable PDF
    """
    try:
        with pdfplumber.open(BytesIO(content)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
    except Exception as e:
        logger.error(f"Failed to extract PDF text: {e}")
        raise InvalidUpload(f"Cannot read PDF file: {e}") from e

    logger.debug(f"Extracted text from {len(pages)} PDF pages")
    return "\n".join(pages)
