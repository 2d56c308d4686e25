"""
Telegram Handler Module

Handles statement files uploaded to the Telegram bot: validation, categorized
preview and import.
"""

from .file_handler import FileHandler, FileProcessResult

__all__ = [
    "FileHandler",
    "FileProcessResult",
]
