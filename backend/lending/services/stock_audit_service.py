"""
Stock audit: detects drift between catalog stock and the loan ledger.

Catalog and ledger commit separately, so a crash between the two writes can
leave a book's ``total_stock - available_stock`` disagreeing with the number
of active loans for it. This service only reports; it never repairs.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from typing import List

from lending.services.book_service import BookService
from lending.services.loan_ledger import LoanLedger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StockDiscrepancy:
    isbn: str
    copies_out_per_catalog: int
    active_loans: int
    book_exists: bool = True

    @property
    def difference(self) -> int:
        return self.copies_out_per_catalog - self.active_loans


class StockAuditService:
    def __init__(self, book_service: BookService, ledger: LoanLedger) -> None:
        self.book_service = book_service
        self.ledger = ledger

    def audit(self) -> List[StockDiscrepancy]:
        """Compare catalog stock with active loans, one entry per mismatch.

        Active loans whose book is gone from the catalog are reported with
        ``book_exists=False``.
        """
        active = Counter(
            r.book_isbn.lower() for r in self.ledger.all_records() if r.is_active
        )
        discrepancies: List[StockDiscrepancy] = []
        seen = set()
        for book in self.book_service.list_books():
            key = book.isbn.lower()
            seen.add(key)
            loans = active.get(key, 0)
            if book.copies_on_loan != loans:
                discrepancies.append(
                    StockDiscrepancy(
                        isbn=book.isbn,
                        copies_out_per_catalog=book.copies_on_loan,
                        active_loans=loans,
                    )
                )

        for key, loans in sorted(active.items()):
            if key not in seen:
                discrepancies.append(
                    StockDiscrepancy(
                        isbn=key,
                        copies_out_per_catalog=0,
                        active_loans=loans,
                        book_exists=False,
                    )
                )

        if discrepancies:
            logger.warning(
                "Stock audit found discrepancies",
                extra={"context": {"count": len(discrepancies)}},
            )
        else:
            logger.info("Stock audit clean")
        return discrepancies
