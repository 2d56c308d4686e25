"""
Account requisites extraction from bank-issued PDF documents.
"""

from .base import BaseRequisitesParser
from .sber import SberRequisitesParser
from .tinkoff import TinkoffRequisitesParser

__all__ = [
    "BaseRequisitesParser",
    "SberRequisitesParser",
    "TinkoffRequisitesParser",
]
