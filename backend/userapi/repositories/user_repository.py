from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Protocol

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from userapi.models.user import User


class StoreError(Exception):
    """A data store write failed."""


class UniqueViolation(StoreError):
    """The store rejected a write on its uniqueness constraint."""


class NotFoundOnWrite(StoreError):
    """The write targeted a row that does not exist."""


class UserRepository(Protocol):
    def get_by_id(self, user_id: int) -> Optional[User]:
        ...

    def get_by_username(self, username: str) -> Optional[User]:
        ...

    def list(self, *, skip: int, take: int) -> List[User]:
        ...

    def create(self, **columns: Any) -> User:
        ...

    def update(self, user: User, changes: Dict[str, Any]) -> User:
        ...

    def delete_by_id(self, user_id: int) -> None:
        ...


class SqlAlchemyUserRepository:
    def __init__(self, db: Session):
        self._db = db

    @contextmanager
    def _write(self) -> Iterator[None]:
        try:
            yield
            self._db.commit()
        except IntegrityError as e:
            self._db.rollback()
            # username is the only constraint a validated write can hit
            raise UniqueViolation(str(e.orig)) from e
        except SQLAlchemyError as e:
            self._db.rollback()
            raise StoreError(str(e)) from e

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._db.get(User, user_id)

    def get_by_username(self, username: str) -> Optional[User]:
        return self._db.query(User).filter(User.username == username).first()

    def list(self, *, skip: int, take: int) -> List[User]:
        return (
            self._db.query(User)
            .order_by(User.id.asc())
            .offset(skip)
            .limit(take)
            .all()
        )

    def create(self, **columns: Any) -> User:
        user = User(**columns)
        with self._write():
            self._db.add(user)
        self._db.refresh(user)
        return user

    def update(self, user: User, changes: Dict[str, Any]) -> User:
        with self._write():
            for k, v in changes.items():
                setattr(user, k, v)
        self._db.refresh(user)
        return user

    def delete_by_id(self, user_id: int) -> None:
        with self._write():
            result = self._db.execute(delete(User).where(User.id == user_id))
            if result.rowcount == 0:
                raise NotFoundOnWrite(f"user {user_id}")
