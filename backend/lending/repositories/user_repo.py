from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from lending.core.exceptions import PersistenceError
from lending.db.base import User as DbUser
from lending.domain.entities import MembershipStatus
from lending.domain.entities import User as DomainUser
from lending.domain.interfaces import IUserRepository


class UserRepository(IUserRepository):
    """Repository for member persistence operations.

    Maps between domain entities and database models. Email lookups are
    case-insensitive; emails are stored as entered.
    """

    def __init__(self, db_session) -> None:
        self.db = db_session

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(f"Failed to save users: {e}") from e

    def get_by_id(self, user_id: str) -> Optional[DomainUser]:
        db_user = self.db.query(DbUser).filter_by(user_id=user_id).first()
        return self._to_domain(db_user) if db_user else None

    def get_by_email(self, email: str) -> Optional[DomainUser]:
        key = (email or "").strip().lower()
        db_user = self.db.query(DbUser).filter(func.lower(DbUser.email) == key).first()
        return self._to_domain(db_user) if db_user else None

    def list_all(self) -> List[DomainUser]:
        db_users = (
            self.db.query(DbUser).order_by(DbUser.last_name, DbUser.first_name).all()
        )
        return [self._to_domain(u) for u in db_users]

    def create(self, user: DomainUser) -> DomainUser:
        if not user.user_id or not user.registration_date:
            raise ValueError("user_id and registration_date are required to create")
        db_user = DbUser(
            user_id=user.user_id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            phone=user.phone,
            address=user.address,
            registration_date=user.registration_date,
            status=user.status.value,
        )
        self.db.add(db_user)
        self._commit()
        self.db.refresh(db_user)
        return self._to_domain(db_user)

    def update(self, user: DomainUser) -> Optional[DomainUser]:
        db_user = self.db.query(DbUser).filter_by(user_id=user.user_id).first()
        if not db_user:
            return None
        # user_id and registration_date are immutable
        db_user.first_name = user.first_name
        db_user.last_name = user.last_name
        db_user.email = user.email
        db_user.phone = user.phone
        db_user.address = user.address
        db_user.status = user.status.value
        self._commit()
        self.db.refresh(db_user)
        return self._to_domain(db_user)

    def delete(self, user_id: str) -> bool:
        db_user = self.db.query(DbUser).filter_by(user_id=user_id).first()
        if not db_user:
            return False
        self.db.delete(db_user)
        self._commit()
        return True

    def _to_domain(self, db_user: DbUser) -> DomainUser:
        return DomainUser(
            user_id=db_user.user_id,
            first_name=db_user.first_name,
            last_name=db_user.last_name,
            email=db_user.email,
            phone=db_user.phone,
            address=db_user.address,
            registration_date=db_user.registration_date,
            status=MembershipStatus(db_user.status),
        )
