"""
Session-per-call adapters for long-lived collaborators.

The application keeps one ``LoanLedger`` for its whole lifetime, while
SQLAlchemy sessions must stay short-lived. These adapters open a fresh
session for every catalog/membership call and for every ledger commit.
"""

from contextlib import contextmanager
from typing import Iterator, List, Optional

from lending.db.session import SessionLocal
from lending.domain.entities import Book, BorrowingRecord, User
from lending.domain.interfaces import ICatalog, IMembership
from lending.repositories.book_repo import BookRepository
from lending.repositories.borrowing_repo import BorrowingRecordRepository
from lending.repositories.user_repo import UserRepository
from lending.services.book_service import BookService
from lending.services.user_service import UserService


@contextmanager
def session_scope() -> Iterator:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


class SessionScopedCatalog(ICatalog):
    def find_book_by_isbn(self, isbn: str) -> Optional[Book]:
        with session_scope() as db:
            return BookService(BookRepository(db)).find_book_by_isbn(isbn)

    def update_book(self, book: Book) -> bool:
        with session_scope() as db:
            return BookService(BookRepository(db)).update_book(book)


class SessionScopedMembership(IMembership):
    def find_user_by_email(self, email: str) -> Optional[User]:
        with session_scope() as db:
            return UserService(UserRepository(db)).find_user_by_email(email)


def load_records() -> List[BorrowingRecord]:
    with session_scope() as db:
        return BorrowingRecordRepository(db).list_all()


def save_records(records: List[BorrowingRecord]) -> None:
    with session_scope() as db:
        BorrowingRecordRepository(db).save_all(records)
