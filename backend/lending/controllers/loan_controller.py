"""
Loan controller: HTTP surface of the loan ledger.

The ledger is created once per application (see ``create_app``) and lives in
``current_app.extensions["loan_ledger"]``; raw request values are resolved
into identifiers here before calling it.
"""

from flask import Blueprint, current_app, jsonify, request

from lending.controllers.serializers import record_to_dict
from lending.core import config
from lending.core.api_utils import api_response, error_response
from lending.core.exceptions import InvalidInputError, LendingError
from lending.db.session import SessionLocal
from lending.repositories.book_repo import BookRepository
from lending.repositories.user_repo import UserRepository
from lending.services.book_service import BookService
from lending.services.loan_ledger import LoanLedger
from lending.services.stock_audit_service import StockAuditService
from lending.services.user_service import UserService

loan_bp = Blueprint("loans", __name__, url_prefix="/loans")


def _ledger() -> LoanLedger:
    return current_app.extensions["loan_ledger"]


def _parse_loan_days(raw) -> int:
    if raw is None:
        return config.get_default_loan_days()
    # JSON floats and bools are rejected, numeric strings are accepted
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    if isinstance(raw, str) and raw.strip().isdigit():
        return int(raw.strip())
    raise InvalidInputError("Loan duration must be a positive number of days.")


@loan_bp.route("/borrow", methods=["POST"])
def borrow():
    """Borrow a book: {"email", "isbn", "loan_days"?}."""
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip()
    isbn = (data.get("isbn") or "").strip()
    if not email or not isbn:
        return api_response(False, "email and isbn are required", None, 400)
    try:
        loan_days = _parse_loan_days(data.get("loan_days"))
        ledger = _ledger()
        record_id = ledger.borrow(email, isbn, loan_days)
    except LendingError as e:
        return error_response(e)
    record = ledger.find_record(record_id)
    return api_response(
        True, "Book borrowed", record_to_dict(record, ledger.today()), 201
    )


@loan_bp.route("/return", methods=["POST"])
def return_book():
    """Return a book: {"email", "isbn"}."""
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip()
    isbn = (data.get("isbn") or "").strip()
    if not email or not isbn:
        return api_response(False, "email and isbn are required", None, 400)
    try:
        ledger = _ledger()
        record_id = ledger.return_book(isbn, email)
    except LendingError as e:
        return error_response(e)
    record = ledger.find_record(record_id)
    return api_response(True, "Book returned", record_to_dict(record))


@loan_bp.route("/", methods=["GET"])
def list_records():
    ledger = _ledger()
    today = ledger.today()
    return jsonify([record_to_dict(r, today) for r in ledger.all_records()]), 200


@loan_bp.route("/overdue", methods=["GET"])
def list_overdue():
    ledger = _ledger()
    today = ledger.today()
    return jsonify([record_to_dict(r, today) for r in ledger.overdue_loans()]), 200


@loan_bp.route("/user/<email>", methods=["GET"])
def list_user_loans(email):
    """Active loans of the member with this email."""
    db = SessionLocal()
    try:
        user = UserService(UserRepository(db)).find_user_by_email(email)
    finally:
        db.close()
    if user is None:
        return api_response(False, f"User with email {email} not found.", None, 404)
    ledger = _ledger()
    today = ledger.today()
    loans = ledger.active_loans_for_user(user.user_id)
    return jsonify([record_to_dict(r, today) for r in loans]), 200


@loan_bp.route("/audit", methods=["GET"])
def audit_stock():
    db = SessionLocal()
    try:
        audit = StockAuditService(BookService(BookRepository(db)), _ledger())
        discrepancies = audit.audit()
    finally:
        db.close()
    data = [
        {
            "isbn": d.isbn,
            "copies_out_per_catalog": d.copies_out_per_catalog,
            "active_loans": d.active_loans,
            "book_exists": d.book_exists,
        }
        for d in discrepancies
    ]
    message = "Stock consistent" if not data else "Stock discrepancies found"
    return api_response(True, message, data)
