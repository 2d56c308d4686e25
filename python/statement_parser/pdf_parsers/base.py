"""
Base PDF Statement Parser Module

PDF text extraction yields a flat, lossy list of lines with inconsistent
line breaks. Each bank format is modeled as a record recognizer walking
that line list; a lower-precision fallback recognizer runs only when the
primary one finds nothing.
"""

import logging
import re
from abc import ABC, abstractmethod

from ..models import ParsedTransaction, ParseResult

logger = logging.getLogger(__name__)

# Russian current account numbers are 20 digits, often printed in groups
_ACCOUNT_DIGITS = r'((?:\d\s?){19}\d)'


class BasePDFParser(ABC):
    """Abstract base class for bank PDF statement parsers."""

    BANK_NAME: str = "Unknown"
    BANK_CODE: str = "unknown"

    # Labels preceding the account number, tried in order
    ACCOUNT_NUMBER_LABELS: list[str] = [
        r'Номер сч[её]та',
        r'Сч[её]т\s*№',
        r'Лицевой сч[её]т',
    ]

    @abstractmethod
    def can_parse(self, text: str) -> bool:
        """Check whether the extracted PDF text is a statement from this bank."""

    def parse(self, text: str) -> list[ParsedTransaction]:
        """Parse extracted statement text into transactions."""
        return self.parse_content(text).transactions

    def parse_content(self, text: str) -> ParseResult:
        """Parse extracted statement text.

        Args:
            text: Text produced by the PDF text extraction step

        Returns:
            ParseResult; errors are set when the document had no recognizable
            records at all, which is distinct from a statement with no operations
        """
        result = ParseResult(bank=self.BANK_CODE)
        result.account_number = self.extract_account_number(text)

        lines = self.split_lines(text)

        transactions = self._parse_records(lines)
        if not transactions:
            logger.info(f"{self.BANK_CODE}: primary recognizer found nothing, trying fallback")
            transactions = self._parse_fallback(lines)

        result.transactions = transactions

        if not transactions and not self._is_empty_statement(text):
            result.errors.append(
                f"No transaction records recognized in {self.BANK_NAME} PDF statement"
            )

        return result

    @staticmethod
    def split_lines(text: str) -> list[str]:
        """Split text into trimmed, non-empty lines."""
        return [line.strip() for line in text.split('\n') if line.strip()]

    def extract_account_number(self, text: str) -> str | None:
        """Find the 20-digit account number printed on the statement."""
        for label in self.ACCOUNT_NUMBER_LABELS:
            match = re.search(label + r'[:\s]*' + _ACCOUNT_DIGITS, text, re.IGNORECASE)
            if match:
                return re.sub(r'\D', '', match.group(1))
        return None

    def _is_empty_statement(self, text: str) -> bool:
        """Detect statements that explicitly report no operations for the period."""
        lower_text = text.lower()
        return any(
            phrase in lower_text
            for phrase in ("операций не было", "нет операций", "операции отсутствуют")
        )

    @abstractmethod
    def _parse_records(self, lines: list[str]) -> list[ParsedTransaction]:
        """Primary record recognizer."""

    @abstractmethod
    def _parse_fallback(self, lines: list[str]) -> list[ParsedTransaction]:
        """Lower-precision single-line recognizer."""
