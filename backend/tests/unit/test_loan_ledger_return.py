"""
Unit tests for LoanLedger.return_book.
"""

from datetime import timedelta
from unittest.mock import Mock

import pytest

from lending.core.exceptions import NoActiveLoanError, UserNotFoundError
from lending.domain.entities import BorrowingStatus
from lending.services.loan_ledger import LoanLedger
from tests.factories.repository_factories import make_book


@pytest.fixture
def persist():
    return Mock()


@pytest.fixture
def ledger(catalog, membership, clock, persist):
    return LoanLedger(catalog, membership, persist=persist, clock=clock)


def test_return_restores_stock_and_closes_record(
    ledger, catalog, member, single_copy_book, clock
):
    record_id = ledger.borrow("u@x.com", "111", 14)
    clock.advance(3)

    returned_id = ledger.return_book("111", "u@x.com")

    assert returned_id == record_id
    assert catalog.stock("111") == 1
    record = ledger.find_record(record_id)
    assert record.status is BorrowingStatus.RETURNED
    assert record.return_date == clock.current


def test_return_twice_fails_with_no_active_loan(
    ledger, catalog, member, single_copy_book
):
    ledger.borrow("u@x.com", "111", 14)
    ledger.return_book("111", "u@x.com")

    with pytest.raises(NoActiveLoanError):
        ledger.return_book("111", "u@x.com")
    assert catalog.stock("111") == 1


def test_return_unknown_user(ledger, single_copy_book):
    with pytest.raises(UserNotFoundError):
        ledger.return_book("111", "nobody@x.com")


def test_return_without_loan(ledger, member, single_copy_book):
    with pytest.raises(NoActiveLoanError):
        ledger.return_book("111", "u@x.com")


def test_return_of_other_members_loan_is_rejected(
    ledger, catalog, member, second_member, single_copy_book
):
    ledger.borrow("u@x.com", "111", 14)

    with pytest.raises(NoActiveLoanError):
        ledger.return_book("111", "u2@x.com")
    assert catalog.stock("111") == 0


def test_return_matches_isbn_case_insensitively(ledger, catalog, member):
    catalog.add(make_book(isbn="978-ABC", total_stock=1))
    ledger.borrow("u@x.com", "978-ABC", 14)

    ledger.return_book("978-abc", "u@x.com")

    assert catalog.stock("978-ABC") == 1


def test_return_of_deleted_book_still_closes_record(
    ledger, catalog, member, single_copy_book, persist, caplog
):
    record_id = ledger.borrow("u@x.com", "111", 14)
    catalog.remove("111")
    update_calls_before = len(catalog.update_calls)

    with caplog.at_level("WARNING"):
        ledger.return_book("111", "u@x.com")

    record = ledger.find_record(record_id)
    assert record.status is BorrowingStatus.RETURNED
    assert len(catalog.update_calls) == update_calls_before
    assert "no longer exists" in caplog.text
    assert persist.call_count == 2


def test_return_does_not_exceed_total_stock(ledger, catalog, member):
    catalog.add(make_book(isbn="111", total_stock=1))
    ledger.borrow("u@x.com", "111", 14)
    # Catalog edit restores the copy behind the ledger's back
    book = catalog.find_book_by_isbn("111")
    book.available_stock = 1
    catalog.add(book)

    ledger.return_book("111", "u@x.com")

    assert catalog.stock("111") == 1


def test_return_persists_ledger_with_returned_status(
    ledger, member, single_copy_book, persist
):
    ledger.borrow("u@x.com", "111", 14)
    ledger.return_book("111", "u@x.com")

    saved = persist.call_args[0][0]
    assert saved[0].status is BorrowingStatus.RETURNED


def test_return_date_uses_clock_not_due_date(
    ledger, member, single_copy_book, clock
):
    record_id = ledger.borrow("u@x.com", "111", 2)
    clock.advance(10)

    ledger.return_book("111", "u@x.com")

    record = ledger.find_record(record_id)
    assert record.return_date == record.borrow_date + timedelta(days=10)
