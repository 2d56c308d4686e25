"""
Statement Importer Module

Import orchestration, upload validation, settings and persistence for bank
statement files.
"""

from .service import CategorizationBreakdown, DetectAccountResult, ImportResult, StatementImporter
from .settings import ImportSettings
from .store import (
    Account,
    Category,
    InMemoryStore,
    SQLTransactionStore,
    StoredTransaction,
    TransactionStore,
)
from .uploads import decode_csv, detect_file_type, validate_upload

__all__ = [
    # Orchestration
    "StatementImporter",
    "ImportResult",
    "DetectAccountResult",
    "CategorizationBreakdown",
    # Settings
    "ImportSettings",
    # Persistence
    "TransactionStore",
    "InMemoryStore",
    "SQLTransactionStore",
    "Account",
    "Category",
    "StoredTransaction",
    # Uploads
    "decode_csv",
    "detect_file_type",
    "validate_upload",
]
