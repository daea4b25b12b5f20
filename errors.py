"""Exceptions raised by the expense tracker core and its store."""


class ExpenseError(Exception):
    """Base class for every error the tracker reports to its callers."""

    kind = "ExpenseError"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.kind)
        self.message = message or self.kind


class ValidationError(ExpenseError, ValueError):
    """Raised when user input does not meet the record constraints."""

    kind = "ValidationError"


class InvalidAmountError(ValidationError):
    kind = "InvalidAmount"


class MissingCategoryError(ValidationError):
    kind = "MissingCategory"


class ExpenseNotFoundError(ExpenseError, LookupError):
    """Raised when an expense id is not part of the loaded record list."""

    kind = "ExpenseNotFound"


class StorageError(ExpenseError, IOError):
    """Raised when the persistence layer cannot complete an operation."""

    kind = "StorageError"


class StorageUnavailableError(StorageError):
    """The database is not open or could not be opened."""

    kind = "StorageUnavailable"


class StorageIOError(StorageError):
    """A read or write against an open database failed."""

    kind = "StorageIOError"


class SchemaMismatchError(StorageError):
    """The expenses table does not have the expected layout.

    This cannot be fixed at runtime: the table has to be dropped and
    recreated (see ``Database.reset``).
    """

    kind = "SchemaMismatch"
