"""
Base Requisites Parser Module

Account requisites PDFs are one-page documents whose field layout drifts
between releases. Each field is extracted by an ordered list of strategies;
the first strategy producing a non-empty value wins.
"""

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Callable

from ..models import AccountRequisites

logger = logging.getLogger(__name__)

Strategy = Callable[[str], str | None]


def regex_strategy(pattern: str, group: int = 1, flags: int = 0) -> Strategy:
    """Build a strategy returning a regex group, stripped, or None."""
    compiled = re.compile(pattern, flags)

    def extract(text: str) -> str | None:
        match = compiled.search(text)
        if not match:
            return None
        return match.group(group).strip() or None

    return extract


def first_match(text: str, strategies: list[Strategy]) -> str | None:
    """Run strategies in order and return the first non-empty result."""
    for strategy in strategies:
        value = strategy(text)
        if value:
            return value
    return None


def title_case(name: str) -> str:
    """Turn an uppercase full name into title case: ИВАНОВ ИВАН -> Иванов Иван."""
    return ' '.join(word[:1].upper() + word[1:].lower() for word in name.split())


class BaseRequisitesParser(ABC):
    """Abstract base class for bank requisites parsers."""

    BANK_NAME: str = "Unknown"

    @abstractmethod
    def can_parse(self, text: str) -> bool:
        """Check whether the PDF text is a requisites document of this bank."""

    def parse(self, text: str) -> AccountRequisites | None:
        """Extract account requisites.

        Args:
            text: Text extracted from the requisites PDF

        Returns:
            AccountRequisites, or None when the card's last four digits
            could not be recovered
        """
        try:
            requisites = self._extract(text)
        except (IndexError, ValueError) as e:
            logger.error(f"Error parsing {self.BANK_NAME} requisites: {e}")
            return None

        if requisites is None:
            logger.warning(f"Could not extract card last four digits from {self.BANK_NAME} PDF")
        return requisites

    @abstractmethod
    def _extract(self, text: str) -> AccountRequisites | None:
        """Run the field strategies; None when last four digits are missing."""
