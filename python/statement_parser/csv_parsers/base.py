"""
Base CSV Parser Module

Abstract base class for bank-specific CSV statement parsers.
"""

import csv
import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from io import StringIO

from ..amounts import clean_description, parse_date
from ..errors import MalformedRecord
from ..models import Direction, ParsedTransaction, ParseResult

logger = logging.getLogger(__name__)

NO_DESCRIPTION = "Без описания"


class BaseCSVParser(ABC):
    """Abstract base class for bank CSV parsers."""

    BANK_NAME: str = "Unknown"
    BANK_CODE: str = "unknown"

    # Semicolon is what Russian banks export; comma is the fallback
    DELIMITERS: tuple[str, ...] = (";", ",")

    # Logical field -> candidate header names, in priority order.
    # Fields are resolved in declaration order and a header is claimed only once.
    COLUMN_MAPPINGS: dict[str, list[str]] = {}

    # Status text fragments marking a row as cancelled or reversed
    CANCELLED_STATUSES = ("отмен", "сторн", "failed", "cancel", "revers")

    @abstractmethod
    def can_parse(self, content: str) -> bool:
        """Check whether the CSV text was exported by this bank."""

    def parse(self, content: str) -> list[ParsedTransaction]:
        """Parse CSV content into transactions."""
        return self.parse_content(content).transactions

    def parse_content(self, content: str) -> ParseResult:
        """Parse CSV content string.

        Malformed rows are skipped and reported as warnings; the parse as a
        whole only fails when no header row can be found.

        Args:
            content: CSV content as string

        Returns:
            ParseResult object
        """
        result = ParseResult(bank=self.BANK_CODE)

        content = self._preprocess_content(content)
        headers, rows = self._read_table(content)

        if not headers:
            result.errors.append("No header row found in CSV")
            return result

        columns = self._resolve_columns(headers)
        if "date" not in columns:
            result.errors.append("Could not detect date column")
            return result

        for row_num, cells in enumerate(rows, start=2):
            row = {
                header: (cells[i].strip() if i < len(cells) else "")
                for i, header in enumerate(headers)
            }
            try:
                transaction = self._parse_row(row, columns)
            except MalformedRecord as e:
                result.warnings.append(f"Row {row_num}: {e}")
                continue

            if transaction:
                result.transactions.append(transaction)

        logger.debug(
            f"{self.BANK_CODE}: parsed {result.transaction_count} rows, "
            f"skipped {len(result.warnings)} malformed"
        )
        return result

    def _preprocess_content(self, content: str) -> str:
        """Preprocess CSV content before parsing.

        Args:
            content: Raw CSV content

        Returns:
            Preprocessed content
        """
        # Remove BOM if present
        if content.startswith('\ufeff'):
            content = content[1:]

        # Normalize line endings
        content = content.replace('\r\n', '\n').replace('\r', '\n')

        return content

    def _read_table(self, content: str) -> tuple[list[str] | None, list[list[str]]]:
        """Split content into a header row and data rows.

        Tries each delimiter in turn and falls back to the next one when the
        reader fails or the header collapses into a single column.
        """
        for delimiter in self.DELIMITERS:
            try:
                rows = [
                    row for row in csv.reader(StringIO(content), delimiter=delimiter)
                    if any(cell.strip() for cell in row)
                ]
            except csv.Error as e:
                logger.debug(f"Delimiter {delimiter!r} failed: {e}")
                continue

            header_index = self._find_header_row(rows)
            if header_index is None:
                continue

            headers = [cell.strip() for cell in rows[header_index]]
            return headers, rows[header_index + 1:]

        return None, []

    def _find_header_row(self, rows: list[list[str]]) -> int | None:
        """Locate the header row, skipping any preamble lines."""
        date_candidates = [c.lower() for c in self.COLUMN_MAPPINGS.get("date", [])]

        for i, row in enumerate(rows):
            if len(row) < 2:
                continue
            cells = [cell.strip().lower() for cell in row]
            if any(candidate in cell for cell in cells for candidate in date_candidates):
                return i

        return None

    def _resolve_columns(self, headers: list[str]) -> dict[str, str]:
        """Map logical fields to actual header names."""
        columns: dict[str, str] = {}
        claimed: set[str] = set()

        for field_name, candidates in self.COLUMN_MAPPINGS.items():
            available = [h for h in headers if h not in claimed]
            header = self._find_column(available, candidates)
            if header is not None:
                columns[field_name] = header
                claimed.add(header)

        return columns

    @staticmethod
    def _find_column(headers: list[str], candidates: list[str]) -> str | None:
        """Find a header by exact, case-insensitive, then substring match."""
        for candidate in candidates:
            if candidate in headers:
                return candidate

        lowered = {h.lower(): h for h in headers}
        for candidate in candidates:
            if candidate.lower() in lowered:
                return lowered[candidate.lower()]

        for candidate in candidates:
            needle = candidate.lower()
            for header in headers:
                if needle in header.lower():
                    return header

        return None

    @staticmethod
    def _value(row: dict[str, str], columns: dict[str, str], field_name: str) -> str:
        """Get a trimmed cell value for a logical field."""
        header = columns.get(field_name)
        if header is None:
            return ""
        return row.get(header, "").strip()

    def _is_cancelled(self, row: dict[str, str], columns: dict[str, str]) -> bool:
        status = self._value(row, columns, "status").lower()
        return bool(status) and any(marker in status for marker in self.CANCELLED_STATUSES)

    @abstractmethod
    def _parse_row(
        self,
        row: dict[str, str],
        columns: dict[str, str]
    ) -> ParsedTransaction | None:
        """Parse a single CSV row into a transaction.

        Args:
            row: Dictionary of column name -> value
            columns: Logical field -> column name mapping

        Returns:
            ParsedTransaction or None if the row should be skipped

        Raises:
            MalformedRecord: If the row cannot be parsed
        """

    def _build_transaction(
        self,
        row: dict[str, str],
        columns: dict[str, str],
        amount: Decimal | None,
        direction: Direction,
    ) -> ParsedTransaction | None:
        """Assemble a transaction from a row once amount and direction are known."""
        date_str = self._value(row, columns, "date")
        txn_date = parse_date(date_str)
        if txn_date is None:
            raise MalformedRecord(f"Cannot parse date: {date_str!r}")

        if amount is None:
            raise MalformedRecord("Missing or unparsable amount")

        # Zero-amount rows (holds, informational lines) are dropped, not imported
        if amount == 0:
            return None

        description = clean_description(
            self._value(row, columns, "description"),
            fallback=NO_DESCRIPTION,
        )

        return ParsedTransaction(
            date=txn_date,
            amount=abs(amount),
            direction=direction,
            description=description,
            category=self._value(row, columns, "category") or None,
            raw_data=dict(row),
        )
