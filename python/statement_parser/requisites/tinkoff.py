"""
Tinkoff (T-Bank) Requisites Parser
"""

import re

from ..models import AccountRequisites
from .base import BaseRequisitesParser, first_match, regex_strategy, title_case


class TinkoffRequisitesParser(BaseRequisitesParser):
    """Parser for T-Bank "справка с реквизитами счета" documents."""

    BANK_NAME = "Тинькофф"

    ISSUER_MARKERS = ("ТБАНК", "ТБанк", "Тинькофф", "TBANK.RU", "tbank.ru")

    LAST_FOUR_STRATEGIES = [
        # "карта № 220070******8823"
        regex_strategy(r'карта\s*№?\s*(\d{6})\*+(\d{4})', group=2, flags=re.IGNORECASE),
        regex_strategy(r'(\d{4,6})\*+(\d{4})', group=2),
    ]

    ACCOUNT_STRATEGIES = [
        regex_strategy(r'сч[её]т\s*№?\s*(\d{20})', flags=re.IGNORECASE),
        regex_strategy(r'Сч[её]т получателя:\s*(\d{20})'),
    ]

    OWNER_STRATEGIES = [
        regex_strategy(r'Получатель:\s*([А-ЯЁа-яё]+\s+[А-ЯЁа-яё]+\s+[А-ЯЁа-яё]+)'),
    ]

    def can_parse(self, text: str) -> bool:
        return "реквизитами счета" in text and any(
            marker in text for marker in self.ISSUER_MARKERS
        )

    def _extract(self, text: str) -> AccountRequisites | None:
        last_four = first_match(text, self.LAST_FOUR_STRATEGIES)
        if not last_four:
            return None

        owner = first_match(text, self.OWNER_STRATEGIES)
        if owner and owner.isupper():
            owner = title_case(owner)

        return AccountRequisites(
            bank_name=self.BANK_NAME,
            suggested_name=f"Тинькофф •{last_four}",
            card_last_four=last_four,
            account_number=first_match(text, self.ACCOUNT_STRATEGIES),
            currency="RUB",
            owner_name=owner,
        )
