"""
Sberbank CSV Parser

Parses Sberbank statement CSV exports. Sber has shipped several layouts:
split credit/debit columns, a single signed amount, or an unsigned amount
with a separate operation type column.
"""

from decimal import Decimal

from ..amounts import parse_signed_amount
from ..errors import MalformedRecord
from ..models import Direction, ParsedTransaction
from .base import BaseCSVParser


class SberParser(BaseCSVParser):
    """Parser for Sberbank CSV exports."""

    BANK_NAME = "Сбербанк"
    BANK_CODE = "sber"

    COLUMN_MAPPINGS = {
        "date": ["Дата", "Дата операции", "Дата проведения", "date"],
        "income": ["Зачисление", "Приход", "Поступление", "Сумма зачисления", "credit"],
        "expense": ["Списание", "Расход", "Сумма списания", "debit"],
        "amount": ["Сумма", "Сумма операции", "amount"],
        "description": [
            "Описание",
            "Назначение",
            "Назначение платежа",
            "Наименование",
            "description",
        ],
        "type": ["Тип операции", "Тип", "Операция", "type"],
        "status": ["Статус", "status"],
        "category": ["Категория", "category"],
    }

    # Type indicator fragments meaning money came in
    INCOME_TYPE_MARKERS = ("поступ", "зачисл", "приход", "пополн")

    # Statement text naming a competing bank
    EXCLUDED_BANKS = ("тинькофф", "tinkoff", "т-банк", "t-bank")

    def can_parse(self, content: str) -> bool:
        """Check bank name or Sber's typical debit/credit column names."""
        lower_content = content.lower()

        if any(name in lower_content for name in self.EXCLUDED_BANKS):
            return False

        if "сбербанк" in lower_content or "sber" in lower_content:
            return True

        return "дата" in lower_content and any(
            column in lower_content
            for column in ("списание", "зачисление", "приход", "расход")
        )

    def _parse_row(
        self,
        row: dict[str, str],
        columns: dict[str, str]
    ) -> ParsedTransaction | None:
        """Parse a Sberbank CSV row."""
        if not self._value(row, columns, "date"):
            return None

        if self._is_cancelled(row, columns):
            return None

        income = self._nonzero(self._value(row, columns, "income"))
        expense = self._nonzero(self._value(row, columns, "expense"))

        if income is not None:
            return self._build_transaction(row, columns, income, Direction.INCOME)

        if expense is not None:
            return self._build_transaction(row, columns, expense, Direction.EXPENSE)

        amount_str = self._value(row, columns, "amount")
        if not amount_str:
            if "income" in columns or "expense" in columns:
                # Split layout with both cells empty: an informational row
                return None
            raise MalformedRecord("Empty amount")

        amount = parse_signed_amount(amount_str)
        if amount is None:
            raise MalformedRecord(f"Cannot parse amount: {amount_str!r}")

        type_str = self._value(row, columns, "type").lower()
        if type_str:
            if any(marker in type_str for marker in self.INCOME_TYPE_MARKERS):
                direction = Direction.INCOME
            else:
                direction = Direction.EXPENSE
        else:
            direction = Direction.INCOME if amount > 0 else Direction.EXPENSE

        return self._build_transaction(row, columns, amount, direction)

    @staticmethod
    def _nonzero(amount_str: str) -> Decimal | None:
        """Parse a split-column cell, treating empty and zero as absent."""
        if not amount_str:
            return None
        amount = parse_signed_amount(amount_str)
        if amount is None:
            raise MalformedRecord(f"Cannot parse amount: {amount_str!r}")
        return abs(amount) if amount != 0 else None
