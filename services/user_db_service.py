"""
DB-backed user service using async SQLAlchemy.

One method per API operation, each a single statement:
- list_users    -> SELECT * FROM user
- get_user      -> SELECT * FROM user WHERE id = ?
- create_user   -> INSERT INTO user (name, email) VALUES (?, ?)
- update_user   -> UPDATE user SET <allow-listed cols> = ? ... WHERE id = ?
- delete_user   -> DELETE FROM user WHERE id = ?
- search_users  -> SELECT * FROM user WHERE name LIKE '%?%'

Failures are raised, not returned: UserNotFoundError for zero rows,
InvalidRequestError for bad PATCH bodies, StorageError wrapping any
SQLAlchemy error. Column names in UPDATE come from MUTABLE_USER_COLUMNS,
never from the client.
"""

from typing import Any, Dict, List

from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from core.errors import InvalidRequestError, StorageError, UserNotFoundError
from models.db_models import MUTABLE_USER_COLUMNS, User
import logging

logger = logging.getLogger(__name__)


class UserDBService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_users(self) -> List[Dict[str, Any]]:
        try:
            result = await self.session.execute(select(User))
            return [self._to_dict(u) for u in result.scalars().all()]
        except SQLAlchemyError as e:
            raise StorageError.from_exception("Error occurred while retrieving users", e) from e

    async def get_user(self, user_id: int) -> Dict[str, Any]:
        try:
            result = await self.session.execute(select(User).where(User.id == user_id))
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StorageError.from_exception("Error occurred while retrieving user", e) from e
        if user is None:
            raise UserNotFoundError()
        return self._to_dict(user)

    async def create_user(self, name: str | None, email: str | None) -> Dict[str, Any]:
        """
        Insert one row and report what the database did.

        Missing name/email are bound as NULL; the NOT NULL columns reject
        them and the failure surfaces as a StorageError with code "conflict".
        """
        user = User(name=name, email=email)
        try:
            self.session.add(user)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StorageError.from_exception("Error occurred while creating user", e) from e
        logger.info("Created user id=%s", user.id)
        return {"insertId": user.id, "affectedRows": 1}

    async def update_user(self, user_id: int, fields: Dict[str, Any]) -> int:
        """
        Apply a partial update and return the number of matched rows.

        ``fields`` is the raw PATCH body. Keys are checked against the
        allow-list before any SQL is built; values are bound in the order the
        keys were given.
        """
        if not isinstance(fields, dict):
            raise InvalidRequestError("Request body must be a JSON object")
        if not fields:
            raise InvalidRequestError("No fields to update")
        unknown = sorted(k for k in fields if k not in MUTABLE_USER_COLUMNS)
        if unknown:
            raise InvalidRequestError(f"Unknown field(s): {', '.join(unknown)}")

        values = [(MUTABLE_USER_COLUMNS[key], value) for key, value in fields.items()]
        stmt = (
            update(User)
            .where(User.id == user_id)
            .ordered_values(*values)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.session.execute(stmt)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StorageError.from_exception("Error occurred while updating user", e) from e
        if result.rowcount == 0:
            raise UserNotFoundError()
        logger.info("Updated user id=%s fields=%s", user_id, list(fields))
        return result.rowcount

    async def delete_user(self, user_id: int) -> int:
        try:
            result = await self.session.execute(
                delete(User).where(User.id == user_id).execution_options(synchronize_session=False)
            )
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StorageError.from_exception("Error occurred while deleting user", e) from e
        if result.rowcount == 0:
            raise UserNotFoundError()
        logger.info("Deleted user id=%s", user_id)
        return result.rowcount

    async def search_users(self, name: str) -> List[Dict[str, Any]]:
        """Substring match on name; zero matches is an empty list, not an error."""
        if not name:
            raise InvalidRequestError("Name parameter is required for search")
        try:
            result = await self.session.execute(
                select(User).where(User.name.contains(name, autoescape=True))
            )
            return [self._to_dict(u) for u in result.scalars().all()]
        except SQLAlchemyError as e:
            raise StorageError.from_exception("Error occurred while searching users", e) from e

    @staticmethod
    def _to_dict(user: User) -> Dict[str, Any]:
        return {
            "id": user.id,
            "name": user.name,
            "email": user.email,
        }
