"""
Account Requisites Parser Tests
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "python"))

from statement_parser.detectors import detect_requisites_parser
from statement_parser.requisites import (
    BaseRequisitesParser,
    SberRequisitesParser,
    TinkoffRequisitesParser,
)
from statement_parser.requisites.base import first_match, regex_strategy, title_case


@pytest.fixture
def sber_requisites_text() -> str:
    return "\n".join([
        "СберБанк Онлайн",
        "ИВАНОВ ИВАН ИВАНОВИЧ",
        "Реквизиты счёта",
        "ПАО СБЕРБАНК",
        "БИК 044525225",
        "Лицевой счёт получателя 40817 81093 80000 12345",
        "КАРТА",
        "МИР Классическая •• 8227",
        "ВАЛЮТА",
        "Российский рубль",
    ])


@pytest.fixture
def tinkoff_requisites_text() -> str:
    return "\n".join([
        "АО «ТБанк»",
        "Справка с реквизитами счета",
        "Получатель: Петров Петр Петрович",
        "Номер договора: 5012345678",
        "Счет получателя: 40817810100001234567",
        "карта № 220070******8823",
    ])


class TestStrategies:
    """Tests for ordered field extraction strategies."""

    def test_first_non_empty_wins(self):
        strategies = [
            regex_strategy(r'missing:(\d+)'),
            regex_strategy(r'second:(\d+)'),
            regex_strategy(r'third:(\d+)'),
        ]
        assert first_match("third:3 second:2", strategies) == "2"

    def test_no_strategy_matches(self):
        assert first_match("nothing", [regex_strategy(r'x(\d)')]) is None

    def test_title_case(self):
        assert title_case("ИВАНОВ ИВАН ИВАНОВИЧ") == "Иванов Иван Иванович"


class TestSberRequisitesParser:
    """Tests for Sber requisites extraction."""

    @pytest.fixture
    def parser(self):
        return SberRequisitesParser()

    def test_can_parse(self, parser, sber_requisites_text, tinkoff_requisites_text):
        assert parser.can_parse(sber_requisites_text) is True
        assert parser.can_parse(tinkoff_requisites_text) is False

    def test_extracts_all_fields(self, parser, sber_requisites_text):
        requisites = parser.parse(sber_requisites_text)

        assert requisites.bank_name == "Сбербанк"
        assert requisites.card_last_four == "8227"
        assert requisites.suggested_name == "Сбер МИР •8227"
        assert requisites.account_number == "40817810938000012345"
        assert requisites.currency == "RUB"
        assert requisites.owner_name == "Иванов Иван Иванович"

    def test_foreign_currency(self, parser, sber_requisites_text):
        text = sber_requisites_text.replace("Российский рубль", "Доллар США")
        assert parser.parse(text).currency == "USD"

    def test_missing_last_four_returns_none(self, parser, sber_requisites_text):
        text = sber_requisites_text.replace("МИР Классическая •• 8227", "")
        assert parser.parse(text) is None


class TestTinkoffRequisitesParser:
    """Tests for T-Bank requisites extraction."""

    @pytest.fixture
    def parser(self):
        return TinkoffRequisitesParser()

    def test_can_parse(self, parser, tinkoff_requisites_text, sber_requisites_text):
        assert parser.can_parse(tinkoff_requisites_text) is True
        assert parser.can_parse(sber_requisites_text) is False

    def test_extracts_all_fields(self, parser, tinkoff_requisites_text):
        requisites = parser.parse(tinkoff_requisites_text)

        assert requisites.bank_name == "Тинькофф"
        assert requisites.card_last_four == "8823"
        assert requisites.suggested_name == "Тинькофф •8823"
        assert requisites.account_number == "40817810100001234567"
        assert requisites.owner_name == "Петров Петр Петрович"

    def test_missing_last_four_returns_none(self, parser, tinkoff_requisites_text):
        text = tinkoff_requisites_text.replace("карта № 220070******8823", "")
        assert parser.parse(text) is None


class TestRequisitesDetection:
    """Tests for requisites dispatch."""

    def test_dispatches_by_bank(self, sber_requisites_text, tinkoff_requisites_text):
        sber = detect_requisites_parser(sber_requisites_text)
        tinkoff = detect_requisites_parser(tinkoff_requisites_text)

        assert isinstance(sber, SberRequisitesParser)
        assert sber.parse(sber_requisites_text).bank_name == "Сбербанк"
        assert isinstance(tinkoff, TinkoffRequisitesParser)
        assert tinkoff.parse(tinkoff_requisites_text).bank_name == "Тинькофф"

    def test_unknown_document(self):
        assert detect_requisites_parser("Справка о доходах") is None

    def test_extraction_error_returns_none(self):
        """Strategy errors are logged and reported as no result."""

        class BrokenParser(BaseRequisitesParser):
            BANK_NAME = "Broken"

            def can_parse(self, text):
                return True

            def _extract(self, text):
                raise ValueError("bad layout")

        parser = detect_requisites_parser("anything", [BrokenParser()])
        assert parser.parse("anything") is None
