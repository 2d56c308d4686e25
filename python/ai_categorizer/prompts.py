"""
Categorization Prompts

Russian-language prompts shared by every AI provider. The model answers with
a JSON object mapping the per-call transaction id to a category name.
"""

import json
from dataclasses import dataclass

from .vocabulary import CategoryVocabulary


@dataclass
class BatchItem:
    """One transaction in a provider call; id is local to the call."""

    id: int
    direction: str
    description: str


def build_system_prompt(vocabulary: CategoryVocabulary) -> str:
    expense = "\n".join(f"- {name}" for name in vocabulary.expense)
    income = "\n".join(f"- {name}" for name in vocabulary.income)

    return f"""Ты — классификатор банковских транзакций. Твоя задача — определить категорию для каждой транзакции.

ДОСТУПНЫЕ КАТЕГОРИИ РАСХОДОВ:
{expense}

ДОСТУПНЫЕ КАТЕГОРИИ ДОХОДОВ:
{income}

ПРАВИЛА:
1. Используй ТОЛЬКО категории из списка выше (точное название)
2. Для расходов (EXPENSE) выбирай из категорий расходов
3. Для доходов (INCOME) выбирай из категорий доходов
4. Если не можешь определить категорию — используй "{vocabulary.default_expense}" для расходов или "{vocabulary.default_income}" для доходов
5. Отвечай ТОЛЬКО JSON без пояснений"""


def build_user_prompt(batch: list[BatchItem]) -> str:
    data = [
        {
            "id": item.id,
            "type": getattr(item.direction, "value", item.direction),
            "description": item.description,
        }
        for item in batch
    ]

    return f"""Категоризируй транзакции:

{json.dumps(data, ensure_ascii=False, indent=2)}

Ответ (только JSON, формат {{"id": "категория"}}):"""
