"""
Bank-specific parsers for PDF statement text.
"""

from .base import BasePDFParser
from .sber import SberPdfParser
from .tinkoff import TinkoffPdfParser

__all__ = [
    "BasePDFParser",
    "SberPdfParser",
    "TinkoffPdfParser",
]
