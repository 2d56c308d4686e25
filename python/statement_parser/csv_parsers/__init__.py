"""
Bank-specific CSV parsers for statement exports.
"""

from .base import BaseCSVParser
from .sber import SberParser
from .tinkoff import TinkoffParser

__all__ = [
    "BaseCSVParser",
    "SberParser",
    "TinkoffParser",
]
