"""
Statement Import Errors

Exception taxonomy shared by the parsers, the AI categorizer and the importer.
Only UnsupportedFormat (and upload validation failures) reach the caller;
everything else is recovered at the seam that raised it.
"""


class StatementImportError(Exception):
    """Base class for all statement import errors."""


class UnsupportedFormat(StatementImportError):
    """No detector recognized the file content."""

    def __init__(self, file_type: str, supported: list[str] | None = None):
        self.file_type = file_type
        self.supported = supported or []
        banks = ", ".join(self.supported) if self.supported else "none"
        super().__init__(
            f"Unrecognized {file_type.upper()} statement format. Supported banks: {banks}"
        )


class MalformedRecord(StatementImportError, ValueError):
    """A single CSV row or PDF line could not be turned into a transaction."""


class ProviderUnavailable(StatementImportError):
    """The AI provider has no configured client."""


class ProviderCallFailed(StatementImportError):
    """The AI provider call failed or returned an unusable response."""


class DuplicateTransaction(StatementImportError):
    """An identical transaction is already stored for the user."""


class AccountNotFound(StatementImportError):
    """The destination account does not exist or belongs to another user."""


class InvalidUpload(StatementImportError):
    """The uploaded file failed size, type or encoding validation."""
