"""
Unit tests for LoanLedger.borrow: check order, success path and stock.
"""

from datetime import timedelta
from unittest.mock import Mock

import pytest

from lending.core.exceptions import (
    AlreadyBorrowedError,
    BookNotFoundError,
    InvalidInputError,
    OutOfStockError,
    UserNotFoundError,
)
from lending.domain.entities import BorrowingStatus
from lending.services.loan_ledger import LoanLedger
from tests.factories.repository_factories import make_book


@pytest.fixture
def persist():
    return Mock()


@pytest.fixture
def ledger(catalog, membership, clock, persist):
    return LoanLedger(catalog, membership, persist=persist, clock=clock)


class TestBorrowSuccess:
    def test_borrow_creates_record_and_takes_stock(
        self, ledger, catalog, member, single_copy_book, clock
    ):
        record_id = ledger.borrow("u@x.com", "111", 14)

        assert catalog.stock("111") == 0
        record = ledger.find_record(record_id)
        assert record.status is BorrowingStatus.BORROWED
        assert record.user_id == member.user_id
        assert record.book_isbn == "111"
        assert record.borrow_date == clock.current
        assert record.due_date == clock.current + timedelta(days=14)
        assert record.return_date is None

    def test_borrow_persists_book_and_ledger(
        self, ledger, catalog, member, single_copy_book, persist
    ):
        record_id = ledger.borrow("u@x.com", "111", 7)

        assert len(catalog.update_calls) == 1
        assert catalog.update_calls[0].available_stock == 0
        persist.assert_called_once()
        saved = persist.call_args[0][0]
        assert [r.record_id for r in saved] == [record_id]

    def test_borrow_matches_email_and_isbn_case_insensitively(
        self, ledger, catalog, member
    ):
        catalog.add(make_book(isbn="978-ABC", total_stock=2))

        ledger.borrow("U@X.COM", "978-abc", 14)

        assert catalog.stock("978-ABC") == 1
        assert ledger.is_book_on_loan("978-ABC")

    def test_member_may_hold_several_different_books(self, ledger, catalog, member):
        catalog.add(make_book(isbn="1", total_stock=1))
        catalog.add(make_book(isbn="2", total_stock=1))

        ledger.borrow("u@x.com", "1", 14)
        ledger.borrow("u@x.com", "2", 14)

        assert len(ledger.active_loans_for_user(member.user_id)) == 2


class TestBorrowFailures:
    @pytest.mark.parametrize("loan_days", [0, -3, 1.5, "14", True, None])
    def test_invalid_loan_days(
        self, ledger, catalog, member, single_copy_book, loan_days
    ):
        with pytest.raises(InvalidInputError):
            ledger.borrow("u@x.com", "111", loan_days)
        assert catalog.stock("111") == 1
        assert ledger.all_records() == []

    def test_invalid_loan_days_checked_before_user(self, ledger):
        # Neither user nor book exists; the duration check must win
        with pytest.raises(InvalidInputError):
            ledger.borrow("nobody@x.com", "missing", 0)

    def test_unknown_user(self, ledger, single_copy_book):
        with pytest.raises(UserNotFoundError):
            ledger.borrow("nobody@x.com", "111", 14)

    def test_user_checked_before_book(self, ledger):
        with pytest.raises(UserNotFoundError):
            ledger.borrow("nobody@x.com", "missing", 14)

    def test_unknown_book(self, ledger, member):
        with pytest.raises(BookNotFoundError):
            ledger.borrow("u@x.com", "missing", 14)

    def test_out_of_stock(
        self, ledger, catalog, member, second_member, single_copy_book
    ):
        ledger.borrow("u@x.com", "111", 14)

        with pytest.raises(OutOfStockError):
            ledger.borrow("u2@x.com", "111", 14)

        assert catalog.stock("111") == 0
        assert len(ledger.all_records()) == 1

    def test_book_with_zero_total_stock_is_out_of_stock(self, ledger, catalog, member):
        catalog.add(make_book(isbn="0", total_stock=0))
        with pytest.raises(OutOfStockError):
            ledger.borrow("u@x.com", "0", 14)

    def test_same_member_cannot_borrow_same_title_twice(self, ledger, catalog, member):
        catalog.add(make_book(isbn="111", total_stock=3))
        ledger.borrow("u@x.com", "111", 14)

        with pytest.raises(AlreadyBorrowedError):
            ledger.borrow("u@x.com", "111", 7)

        assert catalog.stock("111") == 2
        assert len(ledger.all_records()) == 1

    def test_stock_checked_before_duplicate_loan(
        self, ledger, catalog, member, single_copy_book
    ):
        ledger.borrow("u@x.com", "111", 14)
        # Stock is 0 and the member already holds it: OutOfStock is reported
        with pytest.raises(OutOfStockError):
            ledger.borrow("u@x.com", "111", 7)

    def test_failed_borrow_does_not_persist(
        self, ledger, catalog, member, persist
    ):
        with pytest.raises(BookNotFoundError):
            ledger.borrow("u@x.com", "missing", 14)
        persist.assert_not_called()
        assert catalog.update_calls == []

    def test_member_can_borrow_again_after_returning(
        self, ledger, catalog, member, single_copy_book
    ):
        ledger.borrow("u@x.com", "111", 14)
        ledger.return_book("111", "u@x.com")

        ledger.borrow("u@x.com", "111", 14)

        assert catalog.stock("111") == 0
        assert len(ledger.all_records()) == 2
