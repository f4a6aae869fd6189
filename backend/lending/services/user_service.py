import logging
from typing import List, Optional

from lending.core import config
from lending.core.exceptions import DuplicateUserError
from lending.domain.entities import User, new_identifier
from lending.domain.interfaces import IMembership, IUserRepository

logger = logging.getLogger(__name__)


class UserService(IMembership):
    """Membership service: owns members keyed by user_id and unique email.

    This service:
    - Keeps business rules separate from controllers and repositories
    - Depends on IUserRepository, not a concrete implementation
    - Works with domain entities, not database models
    """

    def __init__(self, repo: IUserRepository) -> None:
        self.repo = repo

    def add_user(self, user: User) -> User:
        """Register a new member.

        Business Rules:
        - Email must be unique (case-insensitive)
        - ``user_id`` is generated when missing
        - ``registration_date`` defaults to today

        Raises:
            DuplicateUserError: If the email is already registered
        """
        if self.repo.get_by_email(user.email):
            raise DuplicateUserError(f"User with email {user.email} already exists.")
        if not user.user_id or not user.user_id.strip():
            user.user_id = new_identifier()
        if user.registration_date is None:
            user.registration_date = config.today()
        created = self.repo.create(user)
        logger.info(
            "User added",
            extra={"context": {"user_id": created.user_id, "email": created.email}},
        )
        return created

    def list_users(self) -> List[User]:
        return self.repo.list_all()

    def find_user_by_id(self, user_id: str) -> Optional[User]:
        """Get member by ID - simple delegation to repository."""
        if not user_id:
            return None
        return self.repo.get_by_id(user_id)

    def find_user_by_email(self, email: str) -> Optional[User]:
        """Get member by email (case-insensitive)."""
        if not email or not email.strip():
            return None
        return self.repo.get_by_email(email)

    def update_user(self, user: User) -> bool:
        """Update a member's editable fields.

        Raises:
            DuplicateUserError: If the new email belongs to another member

        Returns:
            True if updated, False if the member does not exist
        """
        if not user.user_id:
            return False
        other = self.repo.get_by_email(user.email)
        if other is not None and other.user_id != user.user_id:
            raise DuplicateUserError(
                f"Another user with email {user.email} already exists."
            )
        updated = self.repo.update(user)
        if updated is None:
            logger.warning(
                "User not found for update",
                extra={"context": {"user_id": user.user_id}},
            )
            return False
        return True

    def delete_user(self, user_id: str) -> bool:
        """Delete a member. Their borrowing records are kept as history."""
        removed = self.repo.delete(user_id)
        if removed:
            logger.info("User deleted", extra={"context": {"user_id": user_id}})
        return removed
