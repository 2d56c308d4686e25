"""
Pytest configuration and fixtures for statement import tests.
"""

import sys
from pathlib import Path

import pytest

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent

sys.path.insert(0, str(PROJECT_ROOT / "python"))

from ai_categorizer import AICategorizer, TTLCache  # noqa: E402
from importer import ImportSettings, InMemoryStore, StatementImporter  # noqa: E402
from statement_parser.category_mapper import CategoryMapper  # noqa: E402


class FakeClock:
    """Manually advanced time source for cache expiry tests."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeProvider:
    """In-process AI provider returning canned answers by description."""

    def __init__(self, name: str = "fake", answers: dict | None = None, available: bool = True, fail: bool = False):
        self.name = name
        self.answers = answers or {}
        self.available = available
        self.fail = fail
        self.calls = []

    def is_available(self) -> bool:
        return self.available

    def categorize(self, batch, vocabulary):
        from statement_parser.errors import ProviderCallFailed

        self.calls.append(batch)
        if self.fail:
            raise ProviderCallFailed("boom")
        return {
            str(item.id): self.answers.get(item.description, vocabulary.default(item.direction))
            for item in batch
        }


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def config_dir() -> Path:
    """Return the config directory path."""
    return PROJECT_ROOT / "config"


@pytest.fixture
def mapper(config_dir: Path) -> CategoryMapper:
    return CategoryMapper(config_dir)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings(config_dir: Path) -> ImportSettings:
    """Settings with no AI keys configured."""
    return ImportSettings(config_dir=config_dir, database_url="sqlite://")


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def account(store: InMemoryStore):
    return store.create_account("user-1", "Сбер МИР •8227", account_number="40817810938000012345")


@pytest.fixture
def importer(store, mapper, settings) -> StatementImporter:
    """Importer without any AI provider."""
    return StatementImporter(
        store,
        mapper=mapper,
        ai_categorizer=AICategorizer(providers=[], cache=TTLCache()),
        settings=settings,
        pdf_text_extractor=lambda content: content.decode("utf-8"),
    )


@pytest.fixture
def tinkoff_csv() -> str:
    """Tinkoff operations export, semicolon-delimited."""
    return (
        '"Дата операции";"Дата платежа";"Номер карты";"Статус";"Сумма операции";'
        '"Валюта операции";"Сумма платежа";"Валюта платежа";"Кэшбэк";"Категория";"MCC";"Описание"\n'
        '"09.01.2026 12:30:00";"09.01.2026";"*8823";"OK";"-1 250,50";"RUB";"-1 250,50";"RUB";"";'
        '"Супермаркеты";"5411";"Пятёрочка"\n'
        '"10.01.2026 09:00:00";"10.01.2026";"*8823";"OK";"50 000,00";"RUB";"50 000,00";"RUB";"";'
        '"Пополнения";"";"Зарплата ООО Ромашка"\n'
        '"11.01.2026 18:45:00";"11.01.2026";"*8823";"FAILED";"-999,00";"RUB";"-999,00";"RUB";"";'
        '"Другое";"";"Отклонённая покупка"\n'
        '"12.01.2026 20:15:00";"12.01.2026";"*8823";"OK";"-480,00";"RUB";"-480,00";"RUB";"";'
        '"Другое";"";"IP Sidorov"\n'
    )


@pytest.fixture
def sber_csv() -> str:
    """Sber export with split debit/credit columns."""
    return (
        "Выписка ПАО Сбербанк по счёту\n"
        "Дата;Описание;Списание;Зачисление\n"
        "09.01.2026;TIMEWEB.CLOUD;400,00;\n"
        "10.01.2026;Перевод от Иванов И.;;8 000,00\n"
        "11.01.2026;Неизвестный магазин;1 234,56;\n"
    )


@pytest.fixture
def sber_pdf_text() -> str:
    """Extracted text of a Sber card statement PDF."""
    return "\n".join([
        "ПАО Сбербанк",
        "Выписка по счёту дебетовой карты",
        "Номер счёта 40817 81093 80000 12345",
        "ДАТА ОПЕРАЦИИ (МСК) КАТЕГОРИЯ СУММА В ВАЛЮТЕ СЧЁТА ОСТАТОК СРЕДСТВ",
        "09.01.2026 01:52 294976 Прочие расходы 400,00 13,72",
        "09.01.2026 TIMEWEB.CLOUD SANKT-PETERBU RUS. Операция по карте ****8227",
        "10.01.2026 14:03 518204 Перевод на карту +8 000,00 8 013,72",
        "10.01.2026 Перевод от И. ИВАНОВ И. Операция по карте ****8227",
        "11.01.2026 10:11 771245 Супермаркеты 1 234,56 6 779,16",
        "11.01.2026 PYATEROCHKA 1234 MOSCOW RUS. Операция по карте ****8227",
    ])


@pytest.fixture
def make_provider():
    """Factory for in-process AI providers."""
    return FakeProvider


# Environment setup for tests
@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch):
    """Keep real AI credentials out of tests."""
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("AI_PROVIDER", raising=False)
    monkeypatch.setenv("ENVIRONMENT", "development")
    yield
