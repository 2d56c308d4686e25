"""
Telegram File Handler Module

Handles statement uploads (CSV/PDF) sent to the bot: validation, a
categorized preview, and the import itself through the StatementImporter.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from importer import ImportSettings, StatementImporter
from importer.uploads import SUPPORTED_EXTENSIONS, detect_file_type
from statement_parser.errors import AccountNotFound, InvalidUpload, UnsupportedFormat
from statement_parser.models import Confidence

logger = logging.getLogger(__name__)

PREVIEW_LIMIT = 10


@dataclass
class FileProcessResult:
    """Result of file processing."""

    success: bool
    file_name: str
    file_type: str  # 'csv', 'pdf', 'unknown'
    message: str
    transactions_found: int = 0
    transactions_processed: int = 0
    duplicates_skipped: int = 0
    errors: list[str] = field(default_factory=list)
    data: dict = field(default_factory=dict)


class FileHandler:
    """Handles statement files uploaded through the chat bot."""

    def __init__(self, importer: StatementImporter, settings: ImportSettings | None = None):
        """Initialize file handler.

        Args:
            importer: Statement importer doing the actual work
            settings: Upload limits; the importer's settings when None
        """
        self.importer = importer
        self.settings = settings or importer.settings

    @property
    def max_file_size(self) -> int:
        return self.settings.max_upload_size

    def validate_file(
        self,
        file_name: str,
        file_size: int
    ) -> tuple[bool, str]:
        """Validate uploaded file before downloading it.

        Args:
            file_name: Original file name
            file_size: File size in bytes

        Returns:
            Tuple of (is_valid, error_message)
        """
        if file_size > self.max_file_size:
            return False, f"Файл слишком большой. Максимум: {self.max_file_size // 1024 // 1024}MB"

        ext = Path(file_name).suffix.lower()
        if ext not in SUPPORTED_EXTENSIONS:
            return False, f"Неподдерживаемый тип файла. Поддерживаются: {', '.join(sorted(SUPPORTED_EXTENSIONS))}"

        return True, ""

    def preview(self, file_name: str, content: bytes) -> FileProcessResult:
        """Parse and categorize a file without saving anything.

        Args:
            file_name: Original file name
            content: File content

        Returns:
            FileProcessResult with the categorized transactions in data
        """
        file_type = self._file_type(file_name, content)

        try:
            bank_name, parse_result = self.importer.parse_file(file_name, content)
        except (UnsupportedFormat, InvalidUpload) as e:
            return self._failure(file_name, file_type, str(e))

        mapper = self.importer.mapper
        categorized = []
        low_indexes = []

        for index, txn in enumerate(parse_result.transactions):
            mapped = mapper.map_category(txn.description, txn.direction, txn.category)
            categorized.append([txn, mapped.name])
            if mapped.confidence == Confidence.LOW:
                low_indexes.append(index)

        ai = self.importer.ai_categorizer
        if low_indexes and ai.is_available():
            ai_results = ai.categorize_transactions([categorized[i][0] for i in low_indexes])
            # Keyword matches keep their category even when a low-confidence row shares the text
            for index in low_indexes:
                item = categorized[index]
                item[1] = ai_results.get(item[0].description, item[1])

        lines = [
            f"📄 *{bank_name}*",
            "",
            f"*Найдено операций:* {parse_result.transaction_count}",
            f"*Доходы:* {parse_result.total_income:,.2f} ₽",
            f"*Расходы:* {parse_result.total_expense:,.2f} ₽",
        ]

        if categorized:
            lines.append("")
            for txn, category in categorized[:PREVIEW_LIMIT]:
                sign = "+" if txn.is_income else "-"
                lines.append(
                    f"{txn.date.strftime('%d.%m.%Y')} {sign}{txn.amount:,.2f} {txn.description} → {category}"
                )
            if len(categorized) > PREVIEW_LIMIT:
                lines.append(f"... и ещё {len(categorized) - PREVIEW_LIMIT}")

        for error in parse_result.errors:
            lines.extend(["", f"⚠️ {error}"])

        return FileProcessResult(
            success=parse_result.recognized,
            file_name=file_name,
            file_type=file_type,
            message="\n".join(lines),
            transactions_found=parse_result.transaction_count,
            errors=parse_result.errors + parse_result.warnings,
            data={
                "bank": bank_name,
                "transactions": [
                    {
                        "date": txn.date.isoformat(),
                        "amount": str(txn.amount),
                        "direction": txn.direction.value,
                        "description": txn.description,
                        "category": category,
                    }
                    for txn, category in categorized
                ],
            },
        )

    def process_file(
        self,
        user_id: str,
        account_id: str,
        file_name: str,
        content: bytes,
    ) -> FileProcessResult:
        """Import an uploaded file into an account.

        Args:
            user_id: Uploader's user ID
            account_id: Destination account
            file_name: Original file name
            content: File content

        Returns:
            FileProcessResult
        """
        file_type = self._file_type(file_name, content)

        try:
            result = self.importer.import_statement(user_id, account_id, file_name, content)
        except AccountNotFound:
            return self._failure(file_name, file_type, "Счёт не найден")
        except (UnsupportedFormat, InvalidUpload) as e:
            return self._failure(file_name, file_type, str(e))

        lines = [
            "✅ *Выписка импортирована*",
            "",
            f"*Банк:* {result.bank_name}",
            f"*Импортировано:* {result.imported}",
            f"*Пропущено дубликатов:* {result.skipped}",
        ]

        if result.categorization:
            lines.extend([
                "",
                f"*По ключевым словам:* {result.categorization.by_keywords}",
                f"*С помощью AI:* {result.categorization.by_ai}",
                f"*По умолчанию:* {result.categorization.by_default}",
            ])

        if result.warnings:
            lines.extend(["", f"*Предупреждений:* {len(result.warnings)}"])

        logger.info(f"Telegram import for {user_id}: {result.imported} imported, {result.skipped} skipped")

        return FileProcessResult(
            success=True,
            file_name=file_name,
            file_type=file_type,
            message="\n".join(lines),
            transactions_found=result.imported + result.skipped,
            transactions_processed=result.imported,
            duplicates_skipped=result.skipped,
            errors=result.warnings,
            data=result.to_dict(),
        )

    @staticmethod
    def _file_type(file_name: str, content: bytes) -> str:
        try:
            return detect_file_type(file_name, content)
        except InvalidUpload:
            return "unknown"

    @staticmethod
    def _failure(file_name: str, file_type: str, message: str) -> FileProcessResult:
        logger.warning(f"File {file_name} rejected: {message}")
        return FileProcessResult(
            success=False,
            file_name=file_name,
            file_type=file_type,
            message=f"❌ {message}",
            errors=[message],
        )
