"""
Domain package - Pure business logic layer.

This package contains:
- entities.py: Domain entities with business logic
- interfaces.py: Collaborator and repository contracts
"""

from .entities import Book, BorrowingRecord, BorrowingStatus, MembershipStatus, User
from .interfaces import (
    IBookRepository,
    IBorrowingRecordRepository,
    ICatalog,
    IMembership,
    IUserRepository,
)

__all__ = [
    # Domain entities
    "Book",
    "User",
    "BorrowingRecord",
    "BorrowingStatus",
    "MembershipStatus",
    # Collaborator interfaces
    "ICatalog",
    "IMembership",
    # Repository interfaces
    "IBookRepository",
    "IUserRepository",
    "IBorrowingRecordRepository",
]
