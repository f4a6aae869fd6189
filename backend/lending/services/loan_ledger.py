"""
Loan ledger: owns borrowing records and coordinates stock with the catalog.

The ledger keeps its records in memory and hands the full list to an injected
``persist`` callback after every mutation. Catalog and ledger commits are two
separate writes with no shared transaction; a failure in either is reported
through the log (and the optional ``on_persistence_error`` hook) but never
undoes the in-memory change. ``StockAuditService`` detects the drift this can
leave behind.

Overdue is not a stored state: a record is overdue when it is still
``BORROWED`` and its due date is before today, evaluated on every query.
"""

import logging
import threading
from dataclasses import replace
from datetime import date, timedelta
from typing import Callable, Iterable, List, Optional

from lending.core import config
from lending.core.exceptions import (
    AlreadyBorrowedError,
    BookNotFoundError,
    InvalidInputError,
    NoActiveLoanError,
    OutOfStockError,
    PersistenceError,
    UserNotFoundError,
)
from lending.domain.entities import Book, BorrowingRecord
from lending.domain.interfaces import IBorrowingRecordRepository, ICatalog, IMembership

logger = logging.getLogger(__name__)

PersistCallback = Callable[[List[BorrowingRecord]], None]
PersistenceErrorHook = Callable[[str, Exception], None]


class LoanLedger:
    """Borrow/return lifecycle engine.

    Borrow and return are check-then-act sequences, so each runs entirely
    under one lock; two callers racing for the last copy cannot both win.
    """

    def __init__(
        self,
        catalog: ICatalog,
        membership: IMembership,
        records: Optional[Iterable[BorrowingRecord]] = None,
        persist: Optional[PersistCallback] = None,
        clock: Callable[[], date] = config.today,
        on_persistence_error: Optional[PersistenceErrorHook] = None,
    ) -> None:
        self.catalog = catalog
        self.membership = membership
        self._records: List[BorrowingRecord] = list(records or [])
        self._persist = persist
        self._clock = clock
        self._on_persistence_error = on_persistence_error
        self._lock = threading.RLock()

    @classmethod
    def from_repository(
        cls,
        catalog: ICatalog,
        membership: IMembership,
        repo: IBorrowingRecordRepository,
        **kwargs,
    ) -> "LoanLedger":
        """Build a ledger loaded from ``repo`` that commits back to it."""
        return cls(
            catalog,
            membership,
            records=repo.list_all(),
            persist=repo.save_all,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Lifecycle operations
    # ------------------------------------------------------------------

    def borrow(self, user_email: str, book_isbn: str, loan_days: int) -> str:
        """Lend one copy of a book to a member.

        Checks run in order and the first failure wins; nothing is mutated
        until every check has passed.

        Returns:
            The new record's id

        Raises:
            InvalidInputError: loan_days is not a positive integer
            UserNotFoundError: no member has this email
            BookNotFoundError: no book has this ISBN
            OutOfStockError: no copies are available
            AlreadyBorrowedError: the member already has this book out
        """
        if (
            isinstance(loan_days, bool)
            or not isinstance(loan_days, int)
            or loan_days <= 0
        ):
            raise InvalidInputError("Loan duration must be a positive number of days.")

        with self._lock:
            user = self.membership.find_user_by_email(user_email)
            if user is None:
                raise UserNotFoundError(f"User with email {user_email} not found.")

            book = self.catalog.find_book_by_isbn(book_isbn)
            if book is None:
                raise BookNotFoundError(f"Book with ISBN {book_isbn} not found.")

            if book.available_stock <= 0:
                raise OutOfStockError(f"Book '{book.title}' is out of stock.")

            if self._find_active(book.isbn, user.user_id) is not None:
                raise AlreadyBorrowedError(
                    f"User {user_email} has already borrowed '{book.title}' "
                    "and not returned it yet."
                )

            today = self._clock()
            record = BorrowingRecord(
                book_isbn=book.isbn,
                user_id=user.user_id,
                borrow_date=today,
                due_date=today + timedelta(days=loan_days),
            )
            self._records.append(record)
            book.decrease_available()

            logger.info(
                "Book borrowed",
                extra={
                    "context": {
                        "record_id": record.record_id,
                        "isbn": book.isbn,
                        "user_id": user.user_id,
                        "due_date": record.due_date.isoformat(),
                        "available_stock": book.available_stock,
                    }
                },
            )

            self._commit_book(book)
            self._commit_records()
            return record.record_id

    def return_book(self, book_isbn: str, user_email: str) -> str:
        """Close a member's active loan of a book and restore one copy.

        A book deleted while on loan does not block the return: the record is
        still closed and the missing book is logged as an inconsistency.

        Returns:
            The closed record's id

        Raises:
            UserNotFoundError: no member has this email
            NoActiveLoanError: the member has no active loan for this ISBN
        """
        with self._lock:
            user = self.membership.find_user_by_email(user_email)
            if user is None:
                raise UserNotFoundError(f"User with email {user_email} not found.")

            record = self._find_active(book_isbn, user.user_id)
            if record is None:
                raise NoActiveLoanError(
                    f"No active borrowing record found for ISBN {book_isbn} "
                    f"and user {user_email}."
                )

            # Resolve before mutating so a failing lookup leaves the record open
            book = self.catalog.find_book_by_isbn(record.book_isbn)
            record.mark_returned(self._clock())

            if book is not None:
                book.increase_available()
                self._commit_book(book)
            else:
                logger.warning(
                    "Returned book no longer exists in catalog; stock not updated",
                    extra={
                        "context": {
                            "record_id": record.record_id,
                            "isbn": record.book_isbn,
                        }
                    },
                )

            logger.info(
                "Book returned",
                extra={
                    "context": {
                        "record_id": record.record_id,
                        "isbn": record.book_isbn,
                        "user_id": user.user_id,
                    }
                },
            )

            self._commit_records()
            return record.record_id

    # ------------------------------------------------------------------
    # Queries (copies only)
    # ------------------------------------------------------------------

    def all_records(self) -> List[BorrowingRecord]:
        with self._lock:
            return [replace(r) for r in self._records]

    def active_loans_for_user(self, user_id: str) -> List[BorrowingRecord]:
        with self._lock:
            return [
                replace(r)
                for r in self._records
                if r.user_id == user_id and r.is_active
            ]

    def overdue_loans(self) -> List[BorrowingRecord]:
        """Active loans whose due date is strictly before today."""
        today = self._clock()
        with self._lock:
            return [replace(r) for r in self._records if r.is_overdue(today)]

    def is_book_on_loan(self, isbn: str) -> bool:
        with self._lock:
            return any(r.is_active and r.matches_isbn(isbn) for r in self._records)

    def find_record(self, record_id: str) -> Optional[BorrowingRecord]:
        with self._lock:
            for record in self._records:
                if record.record_id == record_id:
                    return replace(record)
        return None

    def today(self) -> date:
        return self._clock()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _find_active(self, isbn: str, user_id: str) -> Optional[BorrowingRecord]:
        for record in self._records:
            if (
                record.is_active
                and record.user_id == user_id
                and record.matches_isbn(isbn)
            ):
                return record
        return None

    def _commit_book(self, book: Book) -> None:
        try:
            if not self.catalog.update_book(book):
                self._report(
                    "book_update",
                    PersistenceError(f"Catalog rejected update for ISBN {book.isbn}"),
                )
        except PersistenceError as e:
            self._report("book_update", e)

    def _commit_records(self) -> None:
        if self._persist is None:
            return
        try:
            self._persist([replace(r) for r in self._records])
        except PersistenceError as e:
            self._report("ledger_save", e)

    def _report(self, stage: str, error: Exception) -> None:
        logger.warning(
            "Persistence failed after in-memory update",
            extra={"context": {"stage": stage, "error": str(error)}},
        )
        if self._on_persistence_error is not None:
            self._on_persistence_error(stage, error)
