"""
Sberbank Requisites Parser
"""

import re

from ..models import AccountRequisites
from .base import BaseRequisitesParser, first_match, regex_strategy, title_case

_UPPER_NAME = r'([А-ЯЁ]{2,}\s+[А-ЯЁ]{2,}\s+[А-ЯЁ]{2,})'

_CARD_RE = re.compile(
    r'КАРТА[\s\S]*?(МИР|Visa|MasterCard|Мир)[^\d]*?[\s•*]*(\d{4})',
    re.IGNORECASE,
)

_CURRENCIES = {
    "доллар": "USD",
    "евро": "EUR",
    "рубл": "RUB",
}


class SberRequisitesParser(BaseRequisitesParser):
    """Parser for Sberbank "Реквизиты счёта" documents."""

    BANK_NAME = "Сбербанк"

    OWNER_STRATEGIES = [
        # Uppercase name between the "СберБанк Онлайн" letterhead and БИК
        regex_strategy(r'Сбер[Бб]анк\s+Онлайн[\s\S]*?' + _UPPER_NAME + r'[\s\S]*?БИК'),
        regex_strategy(
            r'Получатель[:\s]+([А-ЯЁ][а-яёА-ЯЁ]+\s+[А-ЯЁ][а-яёА-ЯЁ]+\s+[А-ЯЁ][а-яёА-ЯЁ]+)'
        ),
        regex_strategy(_UPPER_NAME),
    ]

    ACCOUNT_STRATEGIES = [
        regex_strategy(r'Лицевой сч[её]т получателя\s+([\d\s]{20,})'),
        regex_strategy(r'Номер сч[её]та[:\s]+([\d\s]{20,})'),
    ]

    def can_parse(self, text: str) -> bool:
        return "Реквизиты счёта" in text and (
            "СБЕРБАНК" in text or "Сбербанк" in text or "sberbank.ru" in text
        )

    def _extract(self, text: str) -> AccountRequisites | None:
        card_type, last_four = self._extract_card(text)
        if not last_four:
            return None

        owner = first_match(text, self.OWNER_STRATEGIES)
        if owner and owner.isupper():
            owner = title_case(owner)

        account = first_match(text, self.ACCOUNT_STRATEGIES)
        if account:
            account = re.sub(r'\D', '', account)[:20]

        suggested_name = f"Сбер {card_type} •{last_four}" if card_type else f"Сбер •{last_four}"

        return AccountRequisites(
            bank_name=self.BANK_NAME,
            suggested_name=suggested_name,
            card_last_four=last_four,
            account_number=account or None,
            currency=self._extract_currency(text),
            owner_name=owner,
        )

    @staticmethod
    def _extract_card(text: str) -> tuple[str | None, str | None]:
        """Card type and last four: "КАРТА ... МИР Классическая •• 8227"."""
        match = _CARD_RE.search(text)
        if not match:
            return None, None
        return match.group(1), match.group(2)

    @staticmethod
    def _extract_currency(text: str) -> str:
        match = re.search(r'ВАЛЮТА[\s\S]*?(Российский рубль|Доллар США|Евро)', text, re.IGNORECASE)
        if not match:
            return "RUB"

        currency_text = match.group(1).lower()
        for fragment, code in _CURRENCIES.items():
            if fragment in currency_text:
                return code
        return "RUB"
