"""
Category Vocabulary

Direction-specific sets of category names the AI is allowed to answer with.
"""

from dataclasses import dataclass, field

DEFAULT_EXPENSE_CATEGORY = "Прочие расходы"
DEFAULT_INCOME_CATEGORY = "Прочие доходы"


@dataclass
class CategoryVocabulary:
    """Known expense and income categories plus their defaults."""

    expense: list[str] = field(default_factory=list)
    income: list[str] = field(default_factory=list)
    default_expense: str = DEFAULT_EXPENSE_CATEGORY
    default_income: str = DEFAULT_INCOME_CATEGORY

    def __post_init__(self):
        # Defaults are always valid answers
        if self.default_expense not in self.expense:
            self.expense = [*self.expense, self.default_expense]
        if self.default_income not in self.income:
            self.income = [*self.income, self.default_income]

    @classmethod
    def from_mapper(cls, mapper) -> "CategoryVocabulary":
        """Build from a CategoryMapper's configured vocabulary."""
        return cls(
            expense=mapper.known_categories("EXPENSE"),
            income=mapper.known_categories("INCOME"),
            default_expense=mapper.default_category("EXPENSE"),
            default_income=mapper.default_category("INCOME"),
        )

    @classmethod
    def from_names(cls, categories: list[tuple[str, str]]) -> "CategoryVocabulary":
        """Build from (name, direction) pairs, e.g. a user's stored categories."""
        return cls(
            expense=[name for name, direction in categories if direction == "EXPENSE"],
            income=[name for name, direction in categories if direction == "INCOME"],
        )

    def for_direction(self, direction: str) -> list[str]:
        return self.income if _is_income(direction) else self.expense

    def default(self, direction: str) -> str:
        return self.default_income if _is_income(direction) else self.default_expense

    def is_valid(self, name: str, direction: str) -> bool:
        return name in self.for_direction(direction)


def _is_income(direction) -> bool:
    return getattr(direction, "value", direction) == "INCOME"
