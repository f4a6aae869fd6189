"""
Database seeding for local development and demos.

Idempotent: books and members that already exist (by ISBN / email) are
skipped, so the command can be re-run safely.
"""

import logging

from lending.core.exceptions import DuplicateBookError, DuplicateUserError
from lending.db.session import SessionLocal
from lending.domain.entities import Book, User
from lending.repositories.book_repo import BookRepository
from lending.repositories.user_repo import UserRepository
from lending.services.book_service import BookService
from lending.services.user_service import UserService

logger = logging.getLogger(__name__)

SAMPLE_BOOKS = [
    {
        "isbn": "9780141439518",
        "title": "Pride and Prejudice",
        "author": "Jane Austen",
        "publisher": "Penguin Classics",
        "page_count": 480,
        "category": "Classic",
        "total_stock": 3,
    },
    {
        "isbn": "9780451524935",
        "title": "1984",
        "author": "George Orwell",
        "publisher": "Signet Classics",
        "page_count": 328,
        "category": "Dystopian",
        "total_stock": 2,
    },
    {
        "isbn": "9780262033848",
        "title": "Introduction to Algorithms",
        "author": "Thomas H. Cormen",
        "publisher": "MIT Press",
        "page_count": 1312,
        "category": "Computer Science",
        "total_stock": 1,
    },
]

SAMPLE_USERS = [
    {"first_name": "Ada", "last_name": "Lovelace", "email": "ada@example.com"},
    {"first_name": "Alan", "last_name": "Turing", "email": "alan@example.com"},
]


def seed_sample_data() -> dict:
    """Insert the sample catalog and members. Returns counts of new rows."""
    created = {"books": 0, "users": 0}
    with SessionLocal() as db:
        books = BookService(BookRepository(db))
        for data in SAMPLE_BOOKS:
            try:
                books.add_book(Book(**data))
                created["books"] += 1
            except DuplicateBookError:
                logger.debug("Sample book exists", extra={"context": data})

        users = UserService(UserRepository(db))
        for data in SAMPLE_USERS:
            try:
                users.add_user(User(**data))
                created["users"] += 1
            except DuplicateUserError:
                logger.debug("Sample user exists", extra={"context": data})

    logger.info("Sample data seeded", extra={"context": created})
    return created
