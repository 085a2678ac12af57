import logging
from typing import Any, List, Optional

from passlib.context import CryptContext

from userapi.core.exceptions import ConflictError, InternalError, NotFoundError
from userapi.core.security import hash_password
from userapi.core.validators import (
    MAX_USER_ID,
    parse_request_date,
    parse_user_id,
    require_non_empty,
)
from userapi.models.user import User
from userapi.repositories.user_repository import (
    NotFoundOnWrite,
    StoreError,
    UniqueViolation,
    UserRepository,
)
from userapi.schemas.user import UserCreate, UserOut, UserUpdate

logger = logging.getLogger(__name__)


def sanitize_user(user: User) -> UserOut:
    return UserOut.model_validate(user)


class UserService:
    """User lifecycle: validation, uniqueness, hashing, then one store call.

    The repository is bound to a single request; the password context and
    paging limits come from application settings.
    """

    def __init__(
        self,
        users: UserRepository,
        pwd_context: CryptContext,
        *,
        default_take: int,
        max_take: int,
    ):
        self._users = users
        self._pwd_context = pwd_context
        self._default_take = default_take
        self._max_take = max_take

    def create_user(self, data: UserCreate) -> UserOut:
        require_non_empty(
            data.username,
            data.password,
            data.role,
            message="username, password and userrole are required",
        )

        if self._users.get_by_username(data.username):
            raise ConflictError("username already exists")

        request_date = None
        if data.request_date:
            request_date = parse_request_date(data.request_date)

        try:
            user = self._users.create(
                username=data.username,
                password_hash=hash_password(data.password, self._pwd_context),
                role=data.role,
                employee_code=data.employee_code,
                leave_approver=data.leave_approver,
                request_date=request_date,
                approver_name=data.approver_name,
            )
        except StoreError as e:
            raise self._translate(e) from e

        logger.info("created user id=%s username=%s", user.id, user.username)
        return sanitize_user(user)

    def list_users(self, skip: int = 0, take: Optional[int] = None) -> List[UserOut]:
        skip = min(max(0, skip), MAX_USER_ID)
        if not take or take < 0:
            take = self._default_take
        take = min(take, self._max_take)

        return [sanitize_user(u) for u in self._users.list(skip=skip, take=take)]

    def get_user(self, user_id: Any) -> UserOut:
        user = self._users.get_by_id(parse_user_id(user_id))
        if not user:
            raise NotFoundError("not found")
        return sanitize_user(user)

    def update_user(self, user_id: Any, data: UserUpdate) -> UserOut:
        uid = parse_user_id(user_id)

        existing = self._users.get_by_id(uid)
        if not existing:
            raise NotFoundError("not found")

        changes = data.changes()

        username = changes.get("username")
        if username is not None and username != existing.username:
            if self._users.get_by_username(username):
                raise ConflictError("username already exists")

        # validate everything before the write
        if "request_date" in changes:
            changes["request_date"] = parse_request_date(changes["request_date"])

        if "password" in changes:
            changes["password_hash"] = hash_password(changes.pop("password"), self._pwd_context)

        try:
            user = self._users.update(existing, changes)
        except StoreError as e:
            raise self._translate(e) from e

        logger.info("updated user id=%s fields=%s", uid, sorted(changes))
        return sanitize_user(user)

    def delete_user(self, user_id: Any) -> None:
        uid = parse_user_id(user_id)
        try:
            self._users.delete_by_id(uid)
        except StoreError as e:
            raise self._translate(e) from e
        logger.info("deleted user id=%s", uid)

    @staticmethod
    def _translate(e: StoreError) -> Exception:
        if isinstance(e, UniqueViolation):
            return ConflictError("username already exists")
        if isinstance(e, NotFoundOnWrite):
            return NotFoundError("not found")
        return InternalError()
