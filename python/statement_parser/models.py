"""
Statement Data Models

Transient records produced by the statement and requisites parsers.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum


class Direction(str, Enum):
    """Money movement direction."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class Confidence(str, Enum):
    """Category mapper confidence tier."""

    HIGH = "high"
    LOW = "low"


@dataclass
class ParsedTransaction:
    """A single money movement recovered from a statement."""

    date: date
    amount: Decimal
    direction: Direction
    description: str
    category: str | None = None  # label as printed by the bank, not trusted
    raw_data: dict = field(default_factory=dict, compare=False, repr=False)

    @property
    def is_income(self) -> bool:
        return self.direction == Direction.INCOME


@dataclass
class ParseResult:
    """Result of parsing a statement document."""

    bank: str
    transactions: list[ParsedTransaction] = field(default_factory=list)
    account_number: str | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def transaction_count(self) -> int:
        return len(self.transactions)

    @property
    def recognized(self) -> bool:
        """False when the format was detected but no records could be rebuilt."""
        return not (self.errors and not self.transactions)

    @property
    def total_income(self) -> Decimal:
        return sum(
            (t.amount for t in self.transactions if t.direction == Direction.INCOME),
            Decimal("0"),
        )

    @property
    def total_expense(self) -> Decimal:
        return sum(
            (t.amount for t in self.transactions if t.direction == Direction.EXPENSE),
            Decimal("0"),
        )


@dataclass
class AccountRequisites:
    """Account identity extracted from a bank requisites PDF."""

    bank_name: str
    suggested_name: str
    card_last_four: str
    account_number: str | None = None
    currency: str = "RUB"
    owner_name: str | None = None

    def to_dict(self) -> dict:
        return {
            "bank_name": self.bank_name,
            "suggested_name": self.suggested_name,
            "card_last_four": self.card_last_four,
            "account_number": self.account_number,
            "currency": self.currency,
            "owner_name": self.owner_name,
        }
