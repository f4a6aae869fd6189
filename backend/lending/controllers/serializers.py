"""JSON shapes for domain entities, shared by the controllers."""

from typing import Any, Dict, Optional

from lending.domain.entities import Book, BorrowingRecord, User


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def book_to_dict(book: Book) -> Dict[str, Any]:
    return {
        "isbn": book.isbn,
        "title": book.title,
        "author": book.author,
        "publisher": book.publisher,
        "page_count": book.page_count,
        "category": book.category,
        "total_stock": book.total_stock,
        "available_stock": book.available_stock,
        "description": book.description,
        "date_added": _iso(book.date_added),
    }


def user_to_dict(user: User) -> Dict[str, Any]:
    return {
        "user_id": user.user_id,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "email": user.email,
        "phone": user.phone,
        "address": user.address,
        "registration_date": _iso(user.registration_date),
        "status": user.status.value,
    }


def record_to_dict(record: BorrowingRecord, today=None) -> Dict[str, Any]:
    data = {
        "record_id": record.record_id,
        "book_isbn": record.book_isbn,
        "user_id": record.user_id,
        "borrow_date": _iso(record.borrow_date),
        "due_date": _iso(record.due_date),
        "return_date": _iso(record.return_date),
        "status": record.status.value,
    }
    if today is not None:
        data["overdue"] = record.is_overdue(today)
    return data
