"""
Sberbank PDF Statement Parser

Sber card statements render each operation as two lines:

    09.01.2026 01:52 294976 Прочие расходы 400,00 13,72
    09.01.2026 TIMEWEB.CLOUD SANKT-PETERBU RUS. Операция по карте ****8227

The first line carries date, time, authorization code, Sber's own category
label, the operation amount ("+" for income) and the running balance. The
second line carries the processing date and the merchant text followed by a
card-operation suffix that text extraction frequently clips.
"""

import logging
import re

from ..amounts import AMOUNT_TOKEN, clean_description, has_plus_sign, parse_amount, parse_date, recase_description
from ..models import Direction, ParsedTransaction
from .base import BasePDFParser
from .tinkoff import TinkoffPdfParser

logger = logging.getLogger(__name__)

# Category labels Sber prints inline on the first line of a record
SBER_CATEGORIES = [
    "Автомобиль",
    "Благотворительность",
    "Внесение наличных",
    "Возврат, отмена операции",
    "Все для дома",
    "Выдача наличных",
    "Здоровье и красота",
    "Зарплата",
    "ЖКХ",
    "Животные",
    "Искусство",
    "Коммунальные платежи, связь, интернет.",
    "Коммунальные платежи, связь, интернет",
    "Комиссия",
    "Кредиты",
    "Образование",
    "Одежда и аксессуары",
    "Оплата по QR-коду СБП",
    "Отдых и развлечения",
    "Перевод на карту",
    "Перевод с карты",
    "Перевод СБП",
    "Перевод по СБП",
    "Прочие операции",
    "Прочие поступления",
    "Прочие расходы",
    "Путешествия",
    "Рестораны и кафе",
    "Связь и телеком",
    "Супермаркеты",
    "Транспорт",
]

_HEADER_RE = re.compile(r'^(\d{2}\.\d{2}\.\d{4})\s+(\d{2}:\d{2})\s+(\d{4,8})\s+(.+)$')
_AMOUNT_PAIR_RE = re.compile(rf'^\s*({AMOUNT_TOKEN})\s+({AMOUNT_TOKEN})\s*$')
_DESCRIPTION_RE = re.compile(r'^(\d{2}\.\d{2}\.\d{4})\s+(.+)$')
_FALLBACK_RE = re.compile(
    rf'^(\d{{2}}\.\d{{2}}\.\d{{4}})(?:\s+\d{{2}}:\d{{2}})?\s+(\d{{4,8}})\s+(.+?)\s+'
    rf'({AMOUNT_TOKEN})\s+({AMOUNT_TOKEN})$'
)

# Card-operation suffix in full and clipped forms, tried in order
_CARD_SUFFIXES = [
    re.compile(r'[\s.,]*Операция\s+по\s+карте\s+\*+\d{4}\s*$', re.IGNORECASE),
    re.compile(r'[\s.,]*Операция\s+по\s+карте\s*\**\d{0,3}\s*$', re.IGNORECASE),
    re.compile(r'[\s.,]*Операция\s+по\s+к\w*\s*$', re.IGNORECASE),
    re.compile(r'[\s.,]*Операция\s+по\s*$', re.IGNORECASE),
    re.compile(r'[\s.,]*Операци\w*\s*$', re.IGNORECASE),
]


class SberPdfParser(BasePDFParser):
    """Parser for Sberbank PDF card statements."""

    BANK_NAME = "Сбербанк"
    BANK_CODE = "sber"

    BANK_MARKERS = ("сбербанк", "sberbank", "пао сбербанк", "сбер")
    EXCLUDED_BANKS = ("тинькофф", "т-банк", "tinkoff", "t-bank")

    def __init__(self, categories: list[str] | None = None):
        """Initialize the parser.

        Args:
            categories: Inline category vocabulary; defaults to Sber's labels
        """
        vocabulary = categories or SBER_CATEGORIES
        # Longest first so "Перевод по СБП" wins over a shorter overlapping label
        self.categories = sorted(vocabulary, key=len, reverse=True)

    def can_parse(self, text: str) -> bool:
        lower_text = text.lower()
        # A T-Bank letterhead wins over a transfer line naming Sber
        if any(marker in lower_text for marker in TinkoffPdfParser.ISSUER_MARKERS):
            return False
        if "пао сбербанк" in lower_text:
            return True
        return (
            any(marker in lower_text for marker in self.BANK_MARKERS)
            and not any(name in lower_text for name in self.EXCLUDED_BANKS)
        )

    def _parse_records(self, lines: list[str]) -> list[ParsedTransaction]:
        """Two-line recognizer: header line, then optional description line."""
        transactions = []
        i = 0

        while i < len(lines):
            header = self._match_header(lines[i])
            if header is None:
                i += 1
                continue

            txn_date, category, amount_str = header
            i += 1

            description = None
            if i < len(lines) and not _HEADER_RE.match(lines[i]):
                desc_match = _DESCRIPTION_RE.match(lines[i])
                if desc_match:
                    description_text = desc_match.group(2)
                    i += 1
                    # Wrapped merchant text: the suffix landed on the next line
                    if (
                        i < len(lines)
                        and not self._has_card_suffix(description_text)
                        and not _DESCRIPTION_RE.match(lines[i])
                        and self._has_card_suffix(lines[i])
                    ):
                        description_text = f"{description_text} {lines[i]}"
                        i += 1
                    description = self._clean_description(description_text)

            transaction = self._build(txn_date, amount_str, description or category, category)
            if transaction:
                transactions.append(transaction)

        return transactions

    def _parse_fallback(self, lines: list[str]) -> list[ParsedTransaction]:
        """Single-line recognizer: date, auth code, free text, amount pair."""
        transactions = []

        for line in lines:
            match = _FALLBACK_RE.match(line)
            if not match:
                continue

            txn_date = parse_date(match.group(1))
            if txn_date is None:
                continue

            text = match.group(3)
            category = self._find_category(text)
            if category:
                text = text.replace(category, ' ')

            description = self._clean_description(text) or category
            if not description:
                continue

            transaction = self._build(txn_date, match.group(4), description, category)
            if transaction:
                transactions.append(transaction)

        return transactions

    def _match_header(self, line: str):
        """Match a record header line.

        Returns:
            Tuple of (date, category, operation amount text) or None
        """
        match = _HEADER_RE.match(line)
        if not match:
            return None

        txn_date = parse_date(match.group(1))
        if txn_date is None:
            return None

        rest = match.group(4)
        for category in self.categories:
            index = rest.find(category)
            if index < 0:
                continue
            pair = _AMOUNT_PAIR_RE.match(rest[index + len(category):])
            if pair:
                return txn_date, category, pair.group(1)

        return None

    def _find_category(self, text: str) -> str | None:
        for category in self.categories:
            if category in text:
                return category
        return None

    @staticmethod
    def _has_card_suffix(text: str) -> bool:
        return any(pattern.search(text) for pattern in _CARD_SUFFIXES)

    @staticmethod
    def _clean_description(text: str) -> str:
        """Strip the card-operation suffix and normalize case."""
        for pattern in _CARD_SUFFIXES:
            stripped = pattern.sub('', text)
            if stripped != text:
                text = stripped
                break

        text = clean_description(text).strip(' .,;')
        return recase_description(text) if text else ""

    def _build(self, txn_date, amount_str: str, description: str, category: str | None):
        amount = parse_amount(amount_str)
        if not amount:
            return None

        direction = Direction.INCOME if has_plus_sign(amount_str) else Direction.EXPENSE

        return ParsedTransaction(
            date=txn_date,
            amount=amount,
            direction=direction,
            description=clean_description(description),
            category=category,
            raw_data={"amount": amount_str},
        )
