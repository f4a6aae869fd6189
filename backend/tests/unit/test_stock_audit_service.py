"""
Unit tests for StockAuditService.
"""

from unittest.mock import Mock

from lending.services.loan_ledger import LoanLedger
from lending.services.stock_audit_service import StockAuditService
from tests.factories.repository_factories import make_book


def _audit(catalog, ledger, books):
    book_service = Mock()
    book_service.list_books.return_value = books
    return StockAuditService(book_service, ledger).audit()


def test_consistent_stock_reports_nothing(catalog, membership, member, clock):
    catalog.add(make_book(isbn="111", total_stock=2))
    ledger = LoanLedger(catalog, membership, clock=clock)
    ledger.borrow("u@x.com", "111", 14)

    assert _audit(catalog, ledger, list(catalog.books.values())) == []


def test_missed_catalog_write_is_reported(catalog, membership, member, clock):
    catalog.add(make_book(isbn="111", total_stock=2))
    ledger = LoanLedger(catalog, membership, clock=clock)
    ledger.borrow("u@x.com", "111", 14)
    # Catalog still shows every copy on the shelf
    stale = make_book(isbn="111", total_stock=2)

    result = _audit(catalog, ledger, [stale])

    assert len(result) == 1
    assert result[0].isbn == "111"
    assert result[0].copies_out_per_catalog == 0
    assert result[0].active_loans == 1
    assert result[0].difference == -1
    assert result[0].book_exists


def test_active_loan_for_deleted_book(catalog, membership, member, clock):
    catalog.add(make_book(isbn="ABC", total_stock=1))
    ledger = LoanLedger(catalog, membership, clock=clock)
    ledger.borrow("u@x.com", "ABC", 14)

    result = _audit(catalog, ledger, [])

    assert len(result) == 1
    assert result[0].isbn == "abc"
    assert result[0].book_exists is False
    assert result[0].active_loans == 1


def test_returned_loans_do_not_count(catalog, membership, member, clock):
    catalog.add(make_book(isbn="111", total_stock=1))
    ledger = LoanLedger(catalog, membership, clock=clock)
    ledger.borrow("u@x.com", "111", 14)
    ledger.return_book("111", "u@x.com")

    assert _audit(catalog, ledger, list(catalog.books.values())) == []
