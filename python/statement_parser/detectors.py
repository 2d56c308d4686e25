"""
Bank & Format Detectors

Ordered registries of per-bank parsers. Each parser's can_parse predicate is
evaluated in priority order and the first match wins; no match is an
UnsupportedFormat error, never a guess.
"""

import logging

from .csv_parsers import BaseCSVParser, SberParser, TinkoffParser
from .errors import UnsupportedFormat
from .pdf_parsers import BasePDFParser, SberPdfParser, TinkoffPdfParser
from .requisites import BaseRequisitesParser, SberRequisitesParser, TinkoffRequisitesParser

logger = logging.getLogger(__name__)


def csv_registry() -> list[BaseCSVParser]:
    # Predicates exclude each other, so the order only sets evaluation cost
    return [TinkoffParser(), SberParser()]


def pdf_registry() -> list[BasePDFParser]:
    return [TinkoffPdfParser(), SberPdfParser()]


def requisites_registry() -> list[BaseRequisitesParser]:
    return [SberRequisitesParser(), TinkoffRequisitesParser()]


def detect_csv_parser(
    content: str,
    parsers: list[BaseCSVParser] | None = None,
) -> BaseCSVParser:
    """Pick the CSV parser for decoded statement text.

    Raises:
        UnsupportedFormat: If no bank recognizes the content
    """
    parsers = parsers if parsers is not None else csv_registry()
    for parser in parsers:
        if parser.can_parse(content):
            logger.debug(f"CSV statement detected as {parser.BANK_CODE}")
            return parser

    logger.warning("Unrecognized CSV statement format")
    raise UnsupportedFormat("csv", [p.BANK_NAME for p in parsers])


def detect_pdf_parser(
    text: str,
    parsers: list[BasePDFParser] | None = None,
) -> BasePDFParser:
    """Pick the PDF statement parser for extracted text.

    Raises:
        UnsupportedFormat: If no bank recognizes the text
    """
    parsers = parsers if parsers is not None else pdf_registry()
    for parser in parsers:
        if parser.can_parse(text):
            logger.debug(f"PDF statement detected as {parser.BANK_CODE}")
            return parser

    logger.warning("Unrecognized PDF statement format")
    raise UnsupportedFormat("pdf", [p.BANK_NAME for p in parsers])


def detect_requisites_parser(
    text: str,
    parsers: list[BaseRequisitesParser] | None = None,
) -> BaseRequisitesParser | None:
    """Pick the requisites parser, or None when the PDF is not a requisites document."""
    parsers = parsers if parsers is not None else requisites_registry()
    for parser in parsers:
        if parser.can_parse(text):
            return parser
    return None
