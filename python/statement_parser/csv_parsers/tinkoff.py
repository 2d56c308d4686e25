"""
Tinkoff CSV Parser

Parses Tinkoff / T-Bank "operations" CSV exports.
"""

from ..amounts import parse_signed_amount
from ..errors import MalformedRecord
from ..models import Direction, ParsedTransaction
from .base import BaseCSVParser


class TinkoffParser(BaseCSVParser):
    """Parser for Tinkoff CSV exports.

    Columns look like:
    "Дата операции";"Дата платежа";"Номер карты";"Статус";"Сумма операции";
    "Валюта операции";"Сумма платежа";"Валюта платежа";"Кэшбэк";"Категория";
    "MCC";"Описание";...

    The amount is signed: negative values are spending.
    """

    BANK_NAME = "Тинькофф"
    BANK_CODE = "tinkoff"

    COLUMN_MAPPINGS = {
        "date": ["Дата операции", "Дата платежа", "Дата", "date"],
        "amount": ["Сумма операции", "Сумма платежа", "Сумма", "amount"],
        "status": ["Статус", "status"],
        "category": ["Категория", "category"],
        "description": ["Описание", "Название", "description"],
    }

    # Statement text naming a competing bank
    EXCLUDED_BANKS = ("сбербанк", "sberbank")

    def can_parse(self, content: str) -> bool:
        """Tinkoff exports are recognized by their column set, not by bank name."""
        lower_content = content.lower()
        # Sber exports can share the column names but carry an unsigned amount
        if any(name in lower_content for name in self.EXCLUDED_BANKS):
            return False
        return (
            ("дата операции" in lower_content or "дата платежа" in lower_content)
            and ("сумма операции" in lower_content or "сумма платежа" in lower_content)
            and ("категория" in lower_content or "описание" in lower_content)
        )

    def _parse_row(
        self,
        row: dict[str, str],
        columns: dict[str, str]
    ) -> ParsedTransaction | None:
        """Parse a Tinkoff CSV row."""
        if not self._value(row, columns, "date"):
            return None

        if self._is_cancelled(row, columns):
            return None

        amount_str = self._value(row, columns, "amount")
        if not amount_str:
            raise MalformedRecord("Empty amount")

        amount = parse_signed_amount(amount_str)
        if amount is None:
            raise MalformedRecord(f"Cannot parse amount: {amount_str!r}")

        direction = Direction.INCOME if amount > 0 else Direction.EXPENSE
        return self._build_transaction(row, columns, amount, direction)
