"""
Statement Import Service

Orchestrates a statement import: detect the bank, parse, categorize by
keywords then AI, deduplicate against stored transactions and persist.
"""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field

from ai_categorizer import AICategorizer, CategoryVocabulary
from statement_parser.category_mapper import CategoryMapper
from statement_parser.detectors import (
    detect_csv_parser,
    detect_pdf_parser,
    detect_requisites_parser,
)
from statement_parser.errors import AccountNotFound, DuplicateTransaction
from statement_parser.models import AccountRequisites, Confidence, Direction, ParseResult
from statement_parser.pdf_text import extract_text

from .settings import ImportSettings
from .store import Category, TransactionStore
from .uploads import decode_csv, validate_upload

logger = logging.getLogger(__name__)

# Description keywords -> pattern over the user's category names
SMART_CATEGORY_PATTERNS = [
    (("перевод", "сбп", "p2p"), re.compile("перевод")),
    (("наличн", "atm", "банкомат", "снятие"), re.compile("наличн|снятие")),
    (("зарплат", "salary", "оклад", "аванс"), re.compile("зарплат")),
    (("кэшбэк", "cashback", "возврат", "бонус"), re.compile("кэшбэк|возврат")),
    (("процент", "дивиденд", "вклад", "депозит"), re.compile("процент|дивиденд")),
    (("кредит", "займ", "ипотека", "погашение", "рассрочка"), re.compile("кредит|займ")),
]


@dataclass
class CategorizationBreakdown:
    by_keywords: int = 0
    by_ai: int = 0
    by_default: int = 0

    def to_dict(self) -> dict:
        return {
            "by_keywords": self.by_keywords,
            "by_ai": self.by_ai,
            "by_default": self.by_default,
        }


@dataclass
class ImportResult:
    """Outcome of a statement import."""

    imported: int
    skipped: int
    bank_name: str
    categorization: CategorizationBreakdown | None = None
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "imported": self.imported,
            "skipped": self.skipped,
            "bank_name": self.bank_name,
            "categorization": self.categorization.to_dict() if self.categorization else None,
            "warnings": self.warnings,
        }


@dataclass
class DetectAccountResult:
    """Bank and account identity recovered from an uploaded file."""

    bank_name: str
    account_number: str | None = None
    matched_account_id: str | None = None
    matched_account_name: str | None = None
    requisites: AccountRequisites | None = None

    def to_dict(self) -> dict:
        return {
            "bank_name": self.bank_name,
            "account_number": self.account_number,
            "matched_account_id": self.matched_account_id,
            "matched_account_name": self.matched_account_name,
            "requisites": self.requisites.to_dict() if self.requisites else None,
        }


class StatementImporter:
    """Imports bank statements into a TransactionStore."""

    def __init__(
        self,
        store: TransactionStore,
        mapper: CategoryMapper | None = None,
        ai_categorizer: AICategorizer | None = None,
        settings: ImportSettings | None = None,
        pdf_text_extractor: Callable[[bytes], str] = extract_text,
    ):
        """Initialize the importer.

        Args:
            store: Persistence collaborator
            mapper: Keyword category mapper
            ai_categorizer: AI fallback; built from settings when None
            settings: Runtime settings; read from the environment when None
            pdf_text_extractor: PDF bytes to text function
        """
        self.store = store
        self.settings = settings or ImportSettings.from_env()
        self.mapper = mapper or CategoryMapper(self.settings.config_dir)
        self.ai_categorizer = ai_categorizer or AICategorizer.from_settings(
            self.settings,
            vocabulary=CategoryVocabulary.from_mapper(self.mapper),
        )
        self.pdf_text_extractor = pdf_text_extractor

    def detect_account(self, user_id: str, file_name: str, content: bytes) -> DetectAccountResult:
        """Detect the bank and account a file belongs to, without importing.

        Requisites PDFs yield the full AccountRequisites; statement PDFs yield
        the printed account number. CSV exports carry no account number.

        Raises:
            InvalidUpload: If the file fails validation
            UnsupportedFormat: If no bank recognizes the content
        """
        file_type = validate_upload(file_name, content, self.settings.max_upload_size)

        if file_type == "csv":
            parser = detect_csv_parser(decode_csv(content))
            return DetectAccountResult(bank_name=parser.BANK_NAME)

        text = self.pdf_text_extractor(content)

        requisites = None
        requisites_parser = detect_requisites_parser(text)
        if requisites_parser is not None:
            bank_name = requisites_parser.BANK_NAME
            requisites = requisites_parser.parse(text)
            account_number = requisites.account_number if requisites else None
        else:
            parser = detect_pdf_parser(text)
            bank_name = parser.BANK_NAME
            account_number = parser.extract_account_number(text)

        result = DetectAccountResult(
            bank_name=bank_name,
            account_number=account_number,
            requisites=requisites,
        )

        if account_number:
            for account in self.store.list_accounts(user_id):
                if account.account_number == account_number:
                    result.matched_account_id = account.id
                    result.matched_account_name = account.name
                    logger.info(f"Matched account by number: {account_number} -> {account.name}")
                    break

        return result

    def import_statement(
        self,
        user_id: str,
        account_id: str,
        file_name: str,
        content: bytes,
    ) -> ImportResult:
        """Import a statement file into an account.

        Args:
            user_id: Owner of the account
            account_id: Destination account
            file_name: Original file name
            content: Raw file bytes

        Returns:
            ImportResult with imported/skipped counts

        Raises:
            AccountNotFound: If the account does not belong to the user
            InvalidUpload: If the file fails validation
            UnsupportedFormat: If no bank recognizes the content
        """
        account = self.store.find_account(user_id, account_id)
        if account is None:
            raise AccountNotFound(f"Account {account_id} not found")

        bank_name, parse_result = self.parse_file(file_name, content)
        warnings = parse_result.errors + parse_result.warnings
        logger.info(f"Parsed {parse_result.transaction_count} transactions from {bank_name}")

        if not parse_result.transactions:
            logger.warning(f"No transactions parsed from file: {file_name}")
            return ImportResult(imported=0, skipped=0, bank_name=bank_name, warnings=warnings)

        categories = self._ensure_default_categories(user_id)
        vocabulary = self._vocabulary(categories)

        transactions = parse_result.transactions
        assigned: list[str] = []
        low_confidence = []
        low_indexes = []
        breakdown = CategorizationBreakdown()

        for txn in transactions:
            mapped = self.mapper.map_category(txn.description, txn.direction, txn.category)
            assigned.append(mapped.name)
            if mapped.confidence == Confidence.LOW:
                low_confidence.append(txn)
                low_indexes.append(len(assigned) - 1)
            else:
                breakdown.by_keywords += 1

        if low_confidence and self.ai_categorizer.is_available():
            ai_results = self.ai_categorizer.categorize_transactions(low_confidence, vocabulary)
            for i in low_indexes:
                txn = transactions[i]
                category = ai_results.get(txn.description)
                if category and category != vocabulary.default(txn.direction):
                    assigned[i] = category
                    breakdown.by_ai += 1
            logger.info(f"AI categorized {breakdown.by_ai}/{len(low_confidence)} transactions")

        breakdown.by_default = len(low_confidence) - breakdown.by_ai

        category_ids = {(c.direction, c.name): c.id for c in categories}
        imported = 0
        skipped = 0

        for txn, category_name in zip(transactions, assigned):
            if self.store.find_existing_transaction(user_id, txn.date, txn.amount, txn.description):
                skipped += 1
                continue

            category_id = self._resolve_category_id(
                txn.direction, category_name, txn.description, categories, category_ids
            )

            try:
                # Historical rows never touch the account balance
                self.store.create_transaction(
                    user_id=user_id,
                    account_id=account.id,
                    txn_date=txn.date,
                    amount=txn.amount,
                    direction=txn.direction.value,
                    description=txn.description,
                    category_id=category_id,
                )
            except DuplicateTransaction:
                skipped += 1
                continue

            imported += 1

        logger.info(f"Import into {account.name}: {imported} imported, {skipped} skipped")

        return ImportResult(
            imported=imported,
            skipped=skipped,
            bank_name=bank_name,
            categorization=breakdown,
            warnings=warnings,
        )

    def parse_file(self, file_name: str, content: bytes) -> tuple[str, ParseResult]:
        """Validate, detect and parse a statement file.

        Returns:
            Tuple of (bank display name, ParseResult)
        """
        file_type = validate_upload(file_name, content, self.settings.max_upload_size)

        if file_type == "csv":
            text = decode_csv(content)
            parser = detect_csv_parser(text)
        else:
            text = self.pdf_text_extractor(content)
            parser = detect_pdf_parser(text)

        return parser.BANK_NAME, parser.parse_content(text)

    def _ensure_default_categories(self, user_id: str) -> list[Category]:
        """Create the default income and expense categories when missing."""
        categories = self.store.list_categories(user_id)
        existing = {(c.direction, c.name) for c in categories}

        for direction in Direction:
            name = self.mapper.default_category(direction)
            if (direction.value, name) not in existing:
                categories.append(self.store.create_category(user_id, name, direction.value))
                logger.info(f"Created default {direction.value} category {name!r} for {user_id}")

        return categories

    def _vocabulary(self, categories: list[Category]) -> CategoryVocabulary:
        return CategoryVocabulary(
            expense=[c.name for c in categories if c.direction == Direction.EXPENSE.value],
            income=[c.name for c in categories if c.direction == Direction.INCOME.value],
            default_expense=self.mapper.default_category(Direction.EXPENSE),
            default_income=self.mapper.default_category(Direction.INCOME),
        )

    def _resolve_category_id(
        self,
        direction: Direction,
        category_name: str,
        description: str,
        categories: list[Category],
        category_ids: dict[tuple[str, str], str],
    ) -> str:
        """Exact name match, then smart description match, then the default."""
        category_id = category_ids.get((direction.value, category_name))
        if category_id:
            return category_id

        category_id = self._find_category_by_description(description, direction, categories)
        if category_id:
            return category_id

        return category_ids[(direction.value, self.mapper.default_category(direction))]

    @staticmethod
    def _find_category_by_description(
        description: str,
        direction: Direction,
        categories: list[Category],
    ) -> str | None:
        lower_desc = description.lower()

        for keywords, name_pattern in SMART_CATEGORY_PATTERNS:
            if not any(keyword in lower_desc for keyword in keywords):
                continue
            for category in categories:
                if category.direction == direction.value and name_pattern.search(category.name.lower()):
                    return category.id

        return None
