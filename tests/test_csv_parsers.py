"""
CSV Statement Parser Tests

Tests for Tinkoff and Sber CSV parsers and CSV bank detection.
"""

import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "python"))

from statement_parser.csv_parsers import SberParser, TinkoffParser
from statement_parser.detectors import detect_csv_parser
from statement_parser.errors import UnsupportedFormat
from statement_parser.models import Direction, ParseResult

# Sber export with an unsigned amount and an operation type column
SBER_TYPED_CSV = (
    "ПАО Сбербанк\n"
    "Дата операции;Сумма операции;Тип операции;Описание\n"
    "09.01.2026;400,00;Списание;Магнит\n"
)


class TestTinkoffParser:
    """Tests for Tinkoff CSV parser."""

    @pytest.fixture
    def parser(self):
        return TinkoffParser()

    def test_can_parse_correct_format(self, parser, tinkoff_csv):
        assert parser.can_parse(tinkoff_csv) is True

    def test_can_parse_wrong_format(self, parser, sber_csv):
        assert parser.can_parse(sber_csv) is False

    def test_rejects_sber_named_export(self, parser):
        """Negative signal: Sber exports can reuse Tinkoff's column names."""
        assert parser.can_parse(SBER_TYPED_CSV) is False

    def test_parse_transactions(self, parser, tinkoff_csv):
        """Signed amounts decide direction; failed rows are dropped."""
        result = parser.parse_content(tinkoff_csv)

        assert isinstance(result, ParseResult)
        assert result.bank == "tinkoff"
        assert result.transaction_count == 3

        first = result.transactions[0]
        assert first.date == date(2026, 1, 9)
        assert first.amount == Decimal("1250.50")
        assert first.direction == Direction.EXPENSE
        assert first.description == "Пятёрочка"
        assert first.category == "Супермаркеты"

        salary = result.transactions[1]
        assert salary.direction == Direction.INCOME
        assert salary.amount == Decimal("50000.00")

    def test_cancelled_rows_dropped(self, parser, tinkoff_csv):
        descriptions = [t.description for t in parser.parse(tinkoff_csv)]
        assert "Отклонённая покупка" not in descriptions

    def test_delimiter_independence(self, parser):
        """The same rows parse identically with semicolons and commas."""
        rows = [
            ["Дата операции", "Сумма операции", "Категория", "Описание"],
            ["09.01.2026", "-400.00", "Сервис", "Timeweb"],
            ["10.01.2026", "8000.00", "Пополнения", "Перевод"],
        ]
        semicolon = "\n".join(";".join(row) for row in rows)
        comma = "\n".join(",".join(row) for row in rows)

        assert parser.parse(semicolon) == parser.parse(comma)
        assert len(parser.parse(comma)) == 2

    def test_zero_amount_never_emitted(self, parser):
        content = (
            "Дата операции;Сумма операции;Описание\n"
            "09.01.2026;0,00;Проверка карты\n"
            "09.01.2026;-10,00;Кофе\n"
        )
        transactions = parser.parse(content)

        assert len(transactions) == 1
        assert all(t.amount > 0 for t in transactions)

    def test_malformed_row_skipped_with_warning(self, parser):
        content = (
            "Дата операции;Сумма операции;Описание\n"
            "not-a-date;-10,00;Кофе\n"
            "09.01.2026;abc;Чай\n"
            "10.01.2026;-20,00;Булка\n"
        )
        result = parser.parse_content(content)

        assert result.transaction_count == 1
        assert len(result.warnings) == 2
        assert result.warnings[0].startswith("Row 2:")

    def test_missing_description_placeholder(self, parser):
        content = "Дата операции;Сумма операции;Описание\n09.01.2026;-10,00;\n"
        assert parser.parse(content)[0].description == "Без описания"

    def test_bom_and_crlf(self, parser):
        content = "\ufeffДата операции;Сумма операции;Описание\r\n09.01.2026;-10,00;Кофе\r\n"
        transactions = parser.parse(content)

        assert len(transactions) == 1
        assert transactions[0].description == "Кофе"

    def test_no_header_is_error(self, parser):
        result = parser.parse_content("just some text\nwithout a header\n")

        assert result.transactions == []
        assert result.errors


class TestSberParser:
    """Tests for Sber CSV parser."""

    @pytest.fixture
    def parser(self):
        return SberParser()

    def test_can_parse_by_bank_name(self, parser, sber_csv):
        assert parser.can_parse(sber_csv) is True

    def test_can_parse_by_columns(self, parser):
        assert parser.can_parse("Дата;Описание;Списание;Зачисление\n") is True

    def test_rejects_tinkoff_text(self, parser):
        """Negative signal: text naming Tinkoff is not a Sber export."""
        assert parser.can_parse("Сбербанк;Тинькофф\nДата;Списание\n") is False

    def test_split_columns(self, parser, sber_csv):
        """Preamble skipped; debit and credit columns decide direction."""
        transactions = parser.parse(sber_csv)

        assert len(transactions) == 3
        assert transactions[0].direction == Direction.EXPENSE
        assert transactions[0].amount == Decimal("400.00")
        assert transactions[1].direction == Direction.INCOME
        assert transactions[1].amount == Decimal("8000.00")
        assert transactions[2].amount == Decimal("1234.56")

    def test_amount_with_type_column(self, parser):
        content = (
            "Дата;Сумма;Тип операции;Описание\n"
            "09.01.2026;400,00;Списание;Кафе\n"
            "10.01.2026;8 000,00;Зачисление;Зарплата\n"
        )
        transactions = parser.parse(content)

        assert [t.direction for t in transactions] == [Direction.EXPENSE, Direction.INCOME]

    def test_signed_amount_without_type(self, parser):
        content = (
            "Дата;Сумма;Описание\n"
            "09.01.2026;-400,00;Кафе\n"
            "10.01.2026;8 000,00;Зарплата\n"
        )
        transactions = parser.parse(content)

        assert [t.direction for t in transactions] == [Direction.EXPENSE, Direction.INCOME]
        assert transactions[0].amount == Decimal("400.00")

    def test_zero_split_columns_dropped(self, parser):
        """A row with both debit and credit at zero is not a transaction."""
        content = (
            "Дата;Описание;Списание;Зачисление\n"
            "09.01.2026;Проверка карты;0,00;0,00\n"
            "10.01.2026;Кафе;100,00;\n"
        )
        transactions = parser.parse(content)

        assert len(transactions) == 1
        assert all(t.amount > 0 for t in transactions)

    def test_zero_typed_amount_dropped(self, parser):
        content = (
            "Дата;Сумма;Тип операции;Описание\n"
            "09.01.2026;0,00;Списание;Холд\n"
        )
        assert parser.parse(content) == []

    def test_delimiter_independence(self, parser):
        """The same rows parse identically with semicolons and commas."""
        rows = [
            ["Дата", "Описание", "Списание", "Зачисление"],
            ["09.01.2026", "Кафе", "400.00", ""],
            ["10.01.2026", "Зарплата", "", "8000.00"],
        ]
        semicolon = "\n".join(";".join(row) for row in rows)
        comma = "\n".join(",".join(row) for row in rows)

        assert parser.parse(semicolon) == parser.parse(comma)
        assert [t.direction for t in parser.parse(comma)] == [Direction.EXPENSE, Direction.INCOME]

    def test_operation_type_layout(self, parser):
        """Sber layout sharing Tinkoff's column names keeps the type column's direction."""
        transactions = parser.parse(SBER_TYPED_CSV)

        assert len(transactions) == 1
        assert transactions[0].direction == Direction.EXPENSE
        assert transactions[0].amount == Decimal("400.00")


class TestCsvDetection:
    """Tests for the CSV detector registry."""

    def test_detects_tinkoff(self, tinkoff_csv):
        assert isinstance(detect_csv_parser(tinkoff_csv), TinkoffParser)

    def test_detects_sber(self, sber_csv):
        assert isinstance(detect_csv_parser(sber_csv), SberParser)

    def test_unknown_format_raises(self):
        with pytest.raises(UnsupportedFormat) as exc_info:
            detect_csv_parser("Date,Amount,Memo\n2026-01-09,10.00,Coffee\n")

        assert "Тинькофф" in str(exc_info.value)
        assert "Сбербанк" in str(exc_info.value)

    @pytest.mark.parametrize("order", [
        [TinkoffParser, SberParser],
        [SberParser, TinkoffParser],
    ])
    def test_detection_order_independent(self, order, tinkoff_csv, sber_csv):
        """Registry order never changes which bank claims a file."""
        parsers = [parser_class() for parser_class in order]

        assert isinstance(detect_csv_parser(SBER_TYPED_CSV, parsers), SberParser)
        assert isinstance(detect_csv_parser(sber_csv, parsers), SberParser)
        assert isinstance(detect_csv_parser(tinkoff_csv, parsers), TinkoffParser)
