"""
Catalog service: owns Book entities keyed by ISBN.

Implements ``ICatalog`` so the loan ledger can look books up and persist
stock changes without knowing about repositories.
"""

import logging
from typing import List, Optional

from lending.core import config
from lending.core.exceptions import DuplicateBookError
from lending.domain.entities import Book
from lending.domain.interfaces import IBookRepository, ICatalog

logger = logging.getLogger(__name__)


class BookService(ICatalog):
    """Application service for catalog use-cases."""

    def __init__(self, repo: IBookRepository) -> None:
        self.repo = repo

    def add_book(self, book: Book) -> Book:
        """Add a new book to the catalog.

        Business Rules:
        - ISBN must be unique (case-insensitive)
        - ``date_added`` is stamped here and never changes afterwards

        Raises:
            DuplicateBookError: If a book with the same ISBN exists
        """
        if self.repo.get_by_isbn(book.isbn):
            raise DuplicateBookError(f"Book with ISBN {book.isbn} already exists.")
        book.date_added = config.now().replace(tzinfo=None, microsecond=0)
        created = self.repo.create(book)
        logger.info(
            "Book added",
            extra={"context": {"isbn": created.isbn, "title": created.title}},
        )
        return created

    def list_books(self) -> List[Book]:
        return self.repo.list_all()

    def find_book_by_isbn(self, isbn: str) -> Optional[Book]:
        if not isbn or not isbn.strip():
            return None
        return self.repo.get_by_isbn(isbn)

    def find_books_by_title(self, term: str) -> List[Book]:
        """Case-insensitive substring search on title. Blank term matches nothing."""
        if not term or not term.strip():
            return []
        needle = term.strip().lower()
        return [b for b in self.repo.list_all() if needle in (b.title or "").lower()]

    def find_books_by_author(self, term: str) -> List[Book]:
        """Case-insensitive substring search on author. Blank term matches nothing."""
        if not term or not term.strip():
            return []
        needle = term.strip().lower()
        return [b for b in self.repo.list_all() if needle in (b.author or "").lower()]

    def update_book(self, book: Book) -> bool:
        """Persist a book's editable fields.

        ``available_stock`` is clamped into ``[0, total_stock]`` so a lowered
        total never leaves more copies available than exist.

        Returns:
            True if updated, False if no book has this ISBN
        """
        book.available_stock = max(0, min(book.available_stock, book.total_stock))
        updated = self.repo.update(book)
        if updated is None:
            logger.warning(
                "Book not found for update", extra={"context": {"isbn": book.isbn}}
            )
            return False
        return True

    def delete_book(self, isbn: str) -> bool:
        """Delete a book. Borrowing records that reference it are kept."""
        removed = self.repo.delete(isbn)
        if removed:
            logger.info("Book deleted", extra={"context": {"isbn": isbn}})
        else:
            logger.warning(
                "Book not found for deletion", extra={"context": {"isbn": isbn}}
            )
        return removed
