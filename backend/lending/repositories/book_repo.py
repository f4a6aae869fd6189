"""Book repository implementation mapping ORM rows to domain entities."""

from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from lending.core.exceptions import PersistenceError
from lending.db.base import Book as DbBook
from lending.domain.entities import Book as DomainBook
from lending.domain.interfaces import IBookRepository


class BookRepository(IBookRepository):
    """Repository for Book persistence operations."""

    def __init__(self, db_session) -> None:
        self.db = db_session

    def _find(self, isbn: str) -> Optional[DbBook]:
        key = (isbn or "").strip().lower()
        return self.db.query(DbBook).filter(func.lower(DbBook.isbn) == key).first()

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(f"Failed to save books: {e}") from e

    def get_by_isbn(self, isbn: str) -> Optional[DomainBook]:
        db_book = self._find(isbn)
        return self._to_domain(db_book) if db_book else None

    def list_all(self) -> List[DomainBook]:
        db_books = self.db.query(DbBook).order_by(DbBook.title).all()
        return [self._to_domain(b) for b in db_books]

    def create(self, book: DomainBook) -> DomainBook:
        db_book = DbBook(
            isbn=book.isbn,
            title=book.title,
            author=book.author,
            publisher=book.publisher,
            page_count=book.page_count,
            category=book.category,
            total_stock=book.total_stock,
            available_stock=book.available_stock,
            description=book.description,
        )
        if book.date_added is not None:
            db_book.date_added = book.date_added
        self.db.add(db_book)
        self._commit()
        self.db.refresh(db_book)
        return self._to_domain(db_book)

    def update(self, book: DomainBook) -> Optional[DomainBook]:
        db_book = self._find(book.isbn)
        if not db_book:
            return None
        # isbn and date_added never change after creation
        db_book.title = book.title
        db_book.author = book.author
        db_book.publisher = book.publisher
        db_book.page_count = book.page_count
        db_book.category = book.category
        db_book.total_stock = book.total_stock
        db_book.available_stock = book.available_stock
        db_book.description = book.description
        self._commit()
        self.db.refresh(db_book)
        return self._to_domain(db_book)

    def delete(self, isbn: str) -> bool:
        db_book = self._find(isbn)
        if not db_book:
            return False
        self.db.delete(db_book)
        self._commit()
        return True

    def _to_domain(self, db_book: DbBook) -> DomainBook:
        return DomainBook(
            isbn=db_book.isbn,
            title=db_book.title,
            author=db_book.author,
            publisher=db_book.publisher,
            page_count=db_book.page_count,
            category=db_book.category,
            total_stock=db_book.total_stock,
            available_stock=db_book.available_stock,
            description=db_book.description,
            date_added=db_book.date_added,
        )
