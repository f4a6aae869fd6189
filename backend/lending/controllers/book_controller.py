"""
Book controller for handling catalog HTTP requests.

This controller handles HTTP concerns only and delegates to BookService.
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from lending.controllers.serializers import book_to_dict
from lending.core.api_utils import api_response, error_response
from lending.core.exceptions import LendingError, PersistenceError
from lending.db.session import SessionLocal
from lending.domain.entities import Book
from lending.repositories.book_repo import BookRepository
from lending.services.book_service import BookService

logger = logging.getLogger(__name__)

book_bp = Blueprint("books", __name__, url_prefix="/books")


def _to_int(value, field_name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{field_name} must be an integer")


@book_bp.route("/", methods=["GET"])
def list_books():
    """List all books, or search with ?title= / ?author=."""
    db = SessionLocal()
    try:
        service = BookService(BookRepository(db))
        title = request.args.get("title")
        author = request.args.get("author")
        if title is not None:
            books = service.find_books_by_title(title)
        elif author is not None:
            books = service.find_books_by_author(author)
        else:
            books = service.list_books()
        return jsonify([book_to_dict(b) for b in books]), 200
    finally:
        db.close()


@book_bp.route("/<isbn>", methods=["GET"])
def get_book(isbn):
    db = SessionLocal()
    try:
        book = BookService(BookRepository(db)).find_book_by_isbn(isbn)
        if not book:
            return api_response(False, "Book not found", None, 404)
        return jsonify(book_to_dict(book)), 200
    finally:
        db.close()


@book_bp.route("/", methods=["POST"])
def add_book():
    """Add a new book. available_stock starts equal to total_stock."""
    data = request.get_json(silent=True) or {}
    try:
        book = Book(
            isbn=data.get("isbn", ""),
            title=data.get("title", ""),
            author=data.get("author", ""),
            publisher=data.get("publisher", ""),
            page_count=_to_int(data.get("page_count", 0), "page_count"),
            category=data.get("category", ""),
            total_stock=_to_int(data.get("total_stock", 0), "total_stock"),
            description=data.get("description"),
        )
    except ValueError as e:
        return api_response(False, str(e), None, 400)

    db = SessionLocal()
    try:
        created = BookService(BookRepository(db)).add_book(book)
        return jsonify(book_to_dict(created)), 201
    except LendingError as e:
        return error_response(e)
    finally:
        db.close()


@book_bp.route("/<isbn>", methods=["PUT"])
def update_book(isbn):
    data = request.get_json(silent=True) or {}
    db = SessionLocal()
    try:
        service = BookService(BookRepository(db))
        existing = service.find_book_by_isbn(isbn)
        if not existing:
            return api_response(False, "Book not found", None, 404)

        total_stock = _to_int(
            data.get("total_stock", existing.total_stock), "total_stock"
        )
        available_stock = _to_int(
            data.get("available_stock", existing.available_stock), "available_stock"
        )
        updated = Book(
            isbn=existing.isbn,
            title=data.get("title", existing.title),
            author=data.get("author", existing.author),
            publisher=data.get("publisher", existing.publisher),
            page_count=_to_int(
                data.get("page_count", existing.page_count), "page_count"
            ),
            category=data.get("category", existing.category),
            total_stock=total_stock,
            available_stock=max(0, min(available_stock, total_stock)),
            description=data.get("description", existing.description),
            date_added=existing.date_added,
        )
        if not service.update_book(updated):
            return api_response(False, "Book not found", None, 404)
        return api_response(True, "Book updated", book_to_dict(updated))
    except ValueError as e:
        return api_response(False, f"Update failed: {e}", None, 400)
    except PersistenceError as e:
        logger.error(
            "Book update failed to commit",
            extra={"context": {"isbn": isbn, "error": str(e)}},
        )
        return api_response(False, "Update failed: could not save book", None, 500)
    finally:
        db.close()


@book_bp.route("/<isbn>", methods=["DELETE"])
def delete_book(isbn):
    """Delete a book; a book currently on loan needs ?force=true."""
    ledger = current_app.extensions["loan_ledger"]
    force = request.args.get("force", "").lower() in ("true", "1", "yes")
    if ledger.is_book_on_loan(isbn) and not force:
        return api_response(
            False,
            "Book is currently on loan; deleting it leaves its borrowing records "
            "pointing at a missing book. Repeat with ?force=true to confirm.",
            {"code": "book_on_loan"},
            409,
        )

    db = SessionLocal()
    try:
        if not BookService(BookRepository(db)).delete_book(isbn):
            return api_response(False, "Book not found", None, 404)
        return api_response(True, "Book deleted")
    finally:
        db.close()
