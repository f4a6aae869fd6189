"""Borrowing record repository: the loan ledger's commit target."""

from typing import List

from sqlalchemy.exc import SQLAlchemyError

from lending.core.exceptions import PersistenceError
from lending.db.base import BorrowingRecord as DbRecord
from lending.domain.entities import BorrowingRecord as DomainRecord
from lending.domain.entities import BorrowingStatus
from lending.domain.interfaces import IBorrowingRecordRepository


class BorrowingRecordRepository(IBorrowingRecordRepository):
    def __init__(self, db_session) -> None:
        self.db = db_session

    def list_all(self) -> List[DomainRecord]:
        db_records = self.db.query(DbRecord).order_by(DbRecord.id).all()
        return [self._to_domain(r) for r in db_records]

    def save_all(self, records: List[DomainRecord]) -> None:
        """Upsert every record by record_id. Records are never deleted."""
        try:
            existing = {r.record_id: r for r in self.db.query(DbRecord).all()}
            for record in records:
                db_record = existing.get(record.record_id)
                if db_record is None:
                    self.db.add(
                        DbRecord(
                            record_id=record.record_id,
                            book_isbn=record.book_isbn,
                            user_id=record.user_id,
                            borrow_date=record.borrow_date,
                            due_date=record.due_date,
                            return_date=record.return_date,
                            status=record.status.value,
                        )
                    )
                    # Flush per insert so surrogate ids follow list order
                    self.db.flush()
                    continue
                db_record.return_date = record.return_date
                db_record.status = record.status.value
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(f"Failed to save borrowing records: {e}") from e

    def _to_domain(self, db_record: DbRecord) -> DomainRecord:
        status = BorrowingStatus(db_record.status)
        # A stored OVERDUE loan is still out; overdue is derived from due_date
        if status is BorrowingStatus.OVERDUE:
            status = BorrowingStatus.BORROWED
        return DomainRecord(
            record_id=db_record.record_id,
            book_isbn=db_record.book_isbn,
            user_id=db_record.user_id,
            borrow_date=db_record.borrow_date,
            due_date=db_record.due_date,
            return_date=db_record.return_date,
            status=status,
        )
