"""
Abstract interfaces following Interface Segregation Principle.

``ICatalog`` and ``IMembership`` are the only capabilities the loan ledger
consumes; the repository interfaces describe what the services need from
persistence.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from .entities import Book, BorrowingRecord, User


class ICatalog(ABC):
    """Catalog capability consumed by the loan ledger."""

    @abstractmethod
    def find_book_by_isbn(self, isbn: str) -> Optional[Book]:
        """Get book by ISBN (case-insensitive)."""
        pass

    @abstractmethod
    def update_book(self, book: Book) -> bool:
        """Persist a book's mutated fields. Returns False if the book is gone."""
        pass


class IMembership(ABC):
    """Membership capability consumed by the loan ledger."""

    @abstractmethod
    def find_user_by_email(self, email: str) -> Optional[User]:
        """Get member by email (case-insensitive)."""
        pass


class IBookRepository(ABC):
    """Interface for book persistence."""

    @abstractmethod
    def get_by_isbn(self, isbn: str) -> Optional[Book]:
        pass

    @abstractmethod
    def list_all(self) -> List[Book]:
        pass

    @abstractmethod
    def create(self, book: Book) -> Book:
        pass

    @abstractmethod
    def update(self, book: Book) -> Optional[Book]:
        """Update an existing book; returns None when it does not exist."""
        pass

    @abstractmethod
    def delete(self, isbn: str) -> bool:
        pass


class IUserRepository(ABC):
    """Interface for member persistence."""

    @abstractmethod
    def get_by_id(self, user_id: str) -> Optional[User]:
        pass

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:
        pass

    @abstractmethod
    def list_all(self) -> List[User]:
        pass

    @abstractmethod
    def create(self, user: User) -> User:
        pass

    @abstractmethod
    def update(self, user: User) -> Optional[User]:
        """Update an existing member; returns None when it does not exist."""
        pass

    @abstractmethod
    def delete(self, user_id: str) -> bool:
        pass


class IBorrowingRecordRepository(ABC):
    """Interface for the ledger's record store."""

    @abstractmethod
    def list_all(self) -> List[BorrowingRecord]:
        """Get every record in insertion order."""
        pass

    @abstractmethod
    def save_all(self, records: List[BorrowingRecord]) -> None:
        """Persist the full record list (insert new, update changed)."""
        pass
