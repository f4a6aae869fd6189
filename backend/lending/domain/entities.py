"""
Domain entities - Pure business logic, no framework dependencies.

Cross-entity references (a record's book and member) are plain identifiers
resolved lazily through the Catalog and Membership services, never owning
links, so a deleted book or member simply resolves to ``None``.
"""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional


class MembershipStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PASSIVE = "PASSIVE"
    SUSPENDED = "SUSPENDED"
    EXPIRED = "EXPIRED"


class BorrowingStatus(str, Enum):
    """Stored lifecycle state of a borrowing record.

    OVERDUE is never assigned: overdue is derived at query time from
    ``BORROWED`` plus the due date. Stored rows using it load back as
    ``BORROWED``.
    """

    BORROWED = "BORROWED"
    RETURNED = "RETURNED"
    OVERDUE = "OVERDUE"


def new_identifier() -> str:
    return str(uuid.uuid4())


@dataclass
class Book:
    """Domain entity representing a catalog title and its copy stock."""

    isbn: str = ""
    title: str = ""
    author: str = ""
    publisher: str = ""
    page_count: int = 1
    category: str = ""
    total_stock: int = 0
    available_stock: Optional[int] = None
    description: Optional[str] = None
    date_added: Optional[datetime] = None

    def __post_init__(self):
        """Validate business rules."""
        self.isbn = (self.isbn or "").strip()
        if not self.isbn:
            raise ValueError("ISBN is required")
        if not self.title or not self.title.strip():
            raise ValueError("Title is required")
        if self.page_count <= 0:
            raise ValueError("Page count must be positive")
        if self.total_stock < 0:
            raise ValueError("Total stock cannot be negative")
        if self.available_stock is None:
            self.available_stock = self.total_stock
        if not 0 <= self.available_stock <= self.total_stock:
            raise ValueError("Available stock must be between 0 and total stock")

    def decrease_available(self) -> None:
        """Take one copy out of stock; no-op when none are left."""
        if self.available_stock > 0:
            self.available_stock -= 1

    def increase_available(self) -> None:
        """Put one copy back into stock; no-op when already at total stock."""
        if self.available_stock < self.total_stock:
            self.available_stock += 1

    @property
    def copies_on_loan(self) -> int:
        return self.total_stock - self.available_stock

    def matches_isbn(self, isbn: str) -> bool:
        return self.isbn.lower() == (isbn or "").strip().lower()


@dataclass
class User:
    """Domain entity representing a library member."""

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: Optional[str] = None
    address: Optional[str] = None
    user_id: Optional[str] = None
    registration_date: Optional[date] = None
    status: MembershipStatus = MembershipStatus.ACTIVE

    def __post_init__(self):
        """Validate domain rules."""
        if not self.first_name:
            raise ValueError("First name is required")
        self.email = (self.email or "").strip()
        if not self.email:
            raise ValueError("Email is required")
        if "@" not in self.email:
            raise ValueError("Invalid email format")
        self.status = MembershipStatus(self.status)

    @property
    def full_name(self) -> str:
        """Return full name."""
        return f"{self.first_name} {self.last_name}".strip()


@dataclass
class BorrowingRecord:
    """Domain entity for one loan of one book to one member."""

    book_isbn: str
    user_id: str
    borrow_date: date
    due_date: date
    record_id: str = field(default_factory=new_identifier)
    return_date: Optional[date] = None
    status: BorrowingStatus = BorrowingStatus.BORROWED

    def __post_init__(self):
        """Validate business rules."""
        self.status = BorrowingStatus(self.status)
        if self.due_date < self.borrow_date:
            raise ValueError("Due date cannot be before borrow date")

    @property
    def is_active(self) -> bool:
        return self.status == BorrowingStatus.BORROWED

    def is_overdue(self, on: date) -> bool:
        """Check if the loan is still out and its due date has passed."""
        return self.is_active and self.due_date < on

    def matches_isbn(self, isbn: str) -> bool:
        return self.book_isbn.lower() == (isbn or "").strip().lower()

    def mark_returned(self, on: date) -> None:
        if not self.is_active:
            raise ValueError("Record has already been returned")
        self.return_date = on
        self.status = BorrowingStatus.RETURNED
