"""
Tinkoff (T-Bank) PDF Statement Parser

T-Bank statements print one operation per table row:

    09.01.2026 01:52 10.01.2026 03:44 -400.00 ₽ -400.00 ₽ Оплата в TIMEWEB.CLOUD 8227
    SANKT-PETERBU RUS

operation date/time, debit date/time, amount in operation currency, amount in
card currency, description and the card's last four digits. Long descriptions
wrap onto a continuation line.
"""

import logging
import re

from ..amounts import AMOUNT_TOKEN, clean_description, has_plus_sign, parse_amount, parse_date
from ..models import Direction, ParsedTransaction
from .base import BasePDFParser

logger = logging.getLogger(__name__)

_DATE_TIME = r'(\d{2}\.\d{2}\.\d{4})(?:\s+\d{2}:\d{2}(?::\d{2})?)?'

_HEADER_RE = re.compile(
    rf'^{_DATE_TIME}\s+{_DATE_TIME}\s+({AMOUNT_TOKEN})\s*₽\s+({AMOUNT_TOKEN})\s*₽\s*(.*?)(?:\s+(\d{{4}}))?$'
)
_DATE_START_RE = re.compile(r'^\d{2}\.\d{2}\.\d{2,4}')
_FALLBACK_RE = re.compile(
    rf'^(\d{{2}}\.\d{{2}}\.\d{{2,4}})(?:\s+\d{{2}}:\d{{2}})?\s+(.+?)\s+({AMOUNT_TOKEN})\s*(?:₽|руб\.?|RUB)?$',
    re.IGNORECASE,
)

# Table headers and footers that must never be glued onto a description
_BOILERPLATE_PREFIXES = (
    "дата",
    "операции",
    "списания",
    "сумма",
    "описание",
    "номер",
    "карты",
    "пополнения",
    "расходы",
    "итого",
    "страница",
    "ао «тбанк»",
    "ао «тинькофф банк»",
    "с уважением",
)


class TinkoffPdfParser(BasePDFParser):
    """Parser for Tinkoff / T-Bank PDF statements."""

    BANK_NAME = "Тинькофф"
    BANK_CODE = "tinkoff"

    # Legal names printed in the statement letterhead
    ISSUER_MARKERS = ("ао «тбанк»", "ао «тинькофф банк»", "tbank.ru", "tinkoff.ru")
    BANK_MARKERS = ("тинькофф", "tinkoff", "т-банк", "t-bank", "тбанк")

    def can_parse(self, text: str) -> bool:
        lower_text = text.lower()
        if any(marker in lower_text for marker in self.ISSUER_MARKERS):
            return True
        # A Sber statement naming a transfer to a T-Bank card is not a T-Bank statement
        return (
            any(marker in lower_text for marker in self.BANK_MARKERS)
            and "пао сбербанк" not in lower_text
        )

    def _parse_records(self, lines: list[str]) -> list[ParsedTransaction]:
        """Two-line recognizer: table row, then optional wrapped description."""
        transactions = []
        i = 0

        while i < len(lines):
            match = _HEADER_RE.match(lines[i])
            i += 1
            if not match:
                continue

            txn_date = parse_date(match.group(1))
            if txn_date is None:
                continue

            operation_amount = match.group(3)
            payment_amount = match.group(4)
            description = match.group(5)

            if i < len(lines) and self._is_continuation(lines[i]):
                description = f"{description} {lines[i]}"
                i += 1

            transaction = self._build(
                txn_date,
                payment_amount,
                is_income=has_plus_sign(operation_amount) or has_plus_sign(payment_amount),
                description=description,
                card_last_four=match.group(6),
            )
            if transaction:
                transactions.append(transaction)

        return transactions

    def _parse_fallback(self, lines: list[str]) -> list[ParsedTransaction]:
        """Single-line recognizer: date, text, signed amount at end of line."""
        transactions = []

        for line in lines:
            match = _FALLBACK_RE.match(line)
            if not match:
                continue

            txn_date = parse_date(match.group(1))
            if txn_date is None:
                continue

            amount_str = match.group(3)
            transaction = self._build(
                txn_date,
                amount_str,
                is_income=has_plus_sign(amount_str),
                description=match.group(2),
            )
            if transaction:
                transactions.append(transaction)

        return transactions

    @staticmethod
    def _is_continuation(line: str) -> bool:
        if _HEADER_RE.match(line) or _DATE_START_RE.match(line):
            return False
        return not line.lower().startswith(_BOILERPLATE_PREFIXES)

    def _build(
        self,
        txn_date,
        amount_str: str,
        is_income: bool,
        description: str,
        card_last_four: str | None = None,
    ) -> ParsedTransaction | None:
        amount = parse_amount(amount_str)
        if not amount:
            return None

        description = clean_description(description)
        if not description:
            return None

        return ParsedTransaction(
            date=txn_date,
            amount=amount,
            direction=Direction.INCOME if is_income else Direction.EXPENSE,
            description=description,
            raw_data={"amount": amount_str, "card_last_four": card_last_four},
        )
