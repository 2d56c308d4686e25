"""
Statement Parser Module

Bank detection, CSV and PDF statement parsing, requisites extraction and
keyword category mapping for Sberbank and Tinkoff statements.
"""

from .amounts import clean_description, parse_amount, parse_date, parse_signed_amount
from .category_mapper import CategorizationResult, CategoryMapper
from .csv_parsers import BaseCSVParser, SberParser, TinkoffParser
from .detectors import detect_csv_parser, detect_pdf_parser, detect_requisites_parser
from .errors import (
    AccountNotFound,
    DuplicateTransaction,
    InvalidUpload,
    MalformedRecord,
    ProviderCallFailed,
    ProviderUnavailable,
    StatementImportError,
    UnsupportedFormat,
)
from .models import AccountRequisites, Confidence, Direction, ParsedTransaction, ParseResult
from .pdf_parsers import BasePDFParser, SberPdfParser, TinkoffPdfParser
from .requisites import SberRequisitesParser, TinkoffRequisitesParser

__all__ = [
    # Models
    "AccountRequisites",
    "Confidence",
    "Direction",
    "ParsedTransaction",
    "ParseResult",
    # Lexical helpers
    "clean_description",
    "parse_amount",
    "parse_date",
    "parse_signed_amount",
    # Parsers
    "BaseCSVParser",
    "SberParser",
    "TinkoffParser",
    "BasePDFParser",
    "SberPdfParser",
    "TinkoffPdfParser",
    "SberRequisitesParser",
    "TinkoffRequisitesParser",
    # Detection
    "detect_csv_parser",
    "detect_pdf_parser",
    "detect_requisites_parser",
    # Categories
    "CategorizationResult",
    "CategoryMapper",
    # Errors
    "AccountNotFound",
    "DuplicateTransaction",
    "InvalidUpload",
    "MalformedRecord",
    "ProviderCallFailed",
    "ProviderUnavailable",
    "StatementImportError",
    "UnsupportedFormat",
]
