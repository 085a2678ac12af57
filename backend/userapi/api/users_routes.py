# backend/userapi/api/users_routes.py

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import ValidationError as SchemaValidationError

from userapi.api.deps import get_body_fields, get_user_service
from userapi.core.exceptions import ValidationError
from userapi.core.validators import to_int
from userapi.schemas.user import UserCreate, UserOut, UserUpdate
from userapi.services.users import UserService

router = APIRouter()


def _schema_error(exc: SchemaValidationError) -> ValidationError:
    err = exc.errors()[0]
    field = ".".join(str(p) for p in err.get("loc", ())) or "body"
    return ValidationError(f"invalid {field}")


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    fields: Dict[str, Any] = Depends(get_body_fields),
    users: UserService = Depends(get_user_service),
):
    try:
        data = UserCreate.model_validate(fields)
    except SchemaValidationError as e:
        raise _schema_error(e) from e
    return users.create_user(data)


@router.get("", response_model=List[UserOut])
def list_users(
    skip: Optional[str] = None,
    take: Optional[str] = None,
    users: UserService = Depends(get_user_service),
):
    # bad paging values fall back to defaults rather than erroring
    return users.list_users(skip=to_int(skip, 0), take=to_int(take, 0))


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: str, users: UserService = Depends(get_user_service)):
    return users.get_user(user_id)


@router.put("/{user_id}", response_model=UserOut)
def update_user(
    user_id: str,
    fields: Dict[str, Any] = Depends(get_body_fields),
    users: UserService = Depends(get_user_service),
):
    try:
        data = UserUpdate.model_validate(fields)
    except SchemaValidationError as e:
        raise _schema_error(e) from e
    return users.update_user(user_id, data)


@router.delete("/{user_id}")
def delete_user(user_id: str, users: UserService = Depends(get_user_service)):
    users.delete_user(user_id)
    return {"ok": True}
