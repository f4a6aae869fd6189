"""
Custom exceptions for the lending system.

Every error a caller can recover from derives from ``LendingError`` and
carries a stable ``code`` so controllers can translate it without string
matching.
"""


class LendingError(Exception):
    """Base class for recoverable lending and catalog errors."""

    code = "lending_error"

    def __init__(self, message: str = "") -> None:
        self.message = message or (self.__class__.__doc__ or self.code).strip()
        super().__init__(self.message)


class InvalidInputError(LendingError):
    """Input value is not acceptable (e.g. a non-positive loan duration)."""

    code = "invalid_input"


class UserNotFoundError(LendingError):
    """No member matches the given identifier."""

    code = "user_not_found"


class BookNotFoundError(LendingError):
    """No book matches the given ISBN."""

    code = "book_not_found"


class OutOfStockError(LendingError):
    """The book has no available copies left."""

    code = "out_of_stock"


class AlreadyBorrowedError(LendingError):
    """The member already holds an active loan for this book."""

    code = "already_borrowed"


class NoActiveLoanError(LendingError):
    """The member holds no active loan for this book."""

    code = "no_active_loan"


class DuplicateBookError(LendingError):
    """A book with this ISBN already exists."""

    code = "duplicate_book"


class DuplicateUserError(LendingError):
    """A member with this email already exists."""

    code = "duplicate_user"


class PersistenceError(Exception):
    """
    Raised by repositories when the underlying store fails to commit.

    Not a ``LendingError``: the ledger treats it as a side-channel warning
    rather than a failure of the operation.
    """

    pass
