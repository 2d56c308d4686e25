"""
Upload Validation

File type detection and decoding for uploaded statement files.
"""

import logging
from pathlib import Path

from statement_parser.errors import InvalidUpload

from .settings import DEFAULT_MAX_UPLOAD_SIZE

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".csv", ".pdf"}

# Russian bank CSV exports are UTF-8 (often with BOM) or Windows-1251
CSV_ENCODINGS = ("utf-8-sig", "cp1251")


def detect_file_type(file_name: str, content: bytes) -> str:
    """Detect file type from content and name.

    Args:
        file_name: Original file name
        content: File content

    Returns:
        "pdf" or "csv"

    Raises:
        InvalidUpload: If the type is not supported
    """
    if content[:4] == b"%PDF":
        return "pdf"

    ext = Path(file_name or "").suffix.lower()
    if ext == ".csv":
        return "csv"
    if ext == ".pdf":
        return "pdf"

    raise InvalidUpload(
        f"Unsupported file type. Supported: {', '.join(sorted(SUPPORTED_EXTENSIONS))}"
    )


def validate_upload(
    file_name: str,
    content: bytes,
    max_size: int = DEFAULT_MAX_UPLOAD_SIZE,
) -> str:
    """Validate an uploaded file and return its type.

    Raises:
        InvalidUpload: If the file is empty, too large or of an unsupported type
    """
    if not content:
        raise InvalidUpload("File is empty")

    if len(content) > max_size:
        raise InvalidUpload(f"File too large. Maximum size: {max_size // 1024 // 1024}MB")

    return detect_file_type(file_name, content)


def decode_csv(content: bytes) -> str:
    """Decode CSV bytes, trying UTF-8 first and Windows-1251 second."""
    for encoding in CSV_ENCODINGS:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            logger.debug(f"CSV is not {encoding}")

    raise InvalidUpload("Cannot decode CSV file")
