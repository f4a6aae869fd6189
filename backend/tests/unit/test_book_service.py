"""
Unit tests for BookService using the repository mock factories.
"""

from unittest.mock import Mock

import pytest

from lending.core.exceptions import DuplicateBookError
from lending.services.book_service import BookService
from tests.factories.repository_factories import BookRepositoryFactory, make_book


@pytest.fixture
def mock_repo() -> Mock:
    return BookRepositoryFactory.create_mock_full()


@pytest.fixture
def service(mock_repo) -> BookService:
    return BookService(mock_repo)


class TestAddBook:
    def test_add_book_stamps_date_and_creates(self, service, mock_repo):
        book = make_book(isbn="222", total_stock=3)
        mock_repo.create.side_effect = lambda b: b

        created = service.add_book(book)

        mock_repo.get_by_isbn.assert_called_once_with("222")
        mock_repo.create.assert_called_once_with(book)
        assert created.date_added is not None
        assert created.date_added.tzinfo is None
        assert created.available_stock == 3

    def test_add_book_rejects_duplicate_isbn(self, service, mock_repo):
        mock_repo.get_by_isbn.return_value = make_book(isbn="222")

        with pytest.raises(DuplicateBookError):
            service.add_book(make_book(isbn="222"))

        mock_repo.create.assert_not_called()


class TestFindBooks:
    def test_find_by_isbn_blank_returns_none_without_query(self, service, mock_repo):
        assert service.find_book_by_isbn("  ") is None
        assert service.find_book_by_isbn(None) is None
        mock_repo.get_by_isbn.assert_not_called()

    def test_find_by_isbn_delegates(self, service, mock_repo):
        book = make_book(isbn="111")
        mock_repo.get_by_isbn.return_value = book

        assert service.find_book_by_isbn("111") is book

    def test_title_search_is_case_insensitive_substring(self, service, mock_repo):
        mock_repo.list_all.return_value = [
            make_book(isbn="1", title="Dune"),
            make_book(isbn="2", title="Dune Messiah"),
            make_book(isbn="3", title="Neuromancer"),
        ]

        result = service.find_books_by_title("dUnE")

        assert [b.isbn for b in result] == ["1", "2"]

    def test_author_search(self, service, mock_repo):
        mock_repo.list_all.return_value = [
            make_book(isbn="1", author="Frank Herbert"),
            make_book(isbn="2", author="William Gibson"),
        ]

        assert [b.isbn for b in service.find_books_by_author("gibs")] == ["2"]

    @pytest.mark.parametrize("term", ["", "   ", None])
    def test_blank_search_matches_nothing(self, service, mock_repo, term):
        mock_repo.list_all.return_value = [make_book()]

        assert service.find_books_by_title(term) == []
        assert service.find_books_by_author(term) == []


class TestUpdateAndDelete:
    def test_update_returns_true_when_repository_updates(self, service, mock_repo):
        book = make_book()
        mock_repo.update.return_value = book

        assert service.update_book(book) is True

    def test_update_missing_book_returns_false(self, service, mock_repo):
        mock_repo.update.return_value = None

        assert service.update_book(make_book()) is False

    def test_update_clamps_available_stock(self, service, mock_repo):
        book = make_book(total_stock=5)
        book.total_stock = 2
        mock_repo.update.side_effect = lambda b: b

        service.update_book(book)

        assert mock_repo.update.call_args[0][0].available_stock == 2

    def test_delete_reports_outcome(self, service, mock_repo):
        mock_repo.delete.return_value = True
        assert service.delete_book("111") is True

        mock_repo.delete.return_value = False
        assert service.delete_book("111") is False
