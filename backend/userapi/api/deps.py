# backend/userapi/api/deps.py

import json
from typing import Any, Dict

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from userapi.core.exceptions import ValidationError
from userapi.repositories.user_repository import SqlAlchemyUserRepository
from userapi.services.users import UserService

FORM_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_user_service(request: Request, db: Session = Depends(get_db)) -> UserService:
    settings = request.app.state.settings
    return UserService(
        SqlAlchemyUserRepository(db),
        request.app.state.pwd_context,
        default_take=settings.default_take,
        max_take=settings.max_take,
    )


async def get_body_fields(request: Request) -> Dict[str, Any]:
    """JSON, multipart and urlencoded bodies all become one field map."""
    content_type = request.headers.get("content-type", "").lower()

    if content_type.startswith(FORM_TYPES):
        form = await request.form()
        # file parts are not user fields
        return {k: v for k, v in form.items() if isinstance(v, str)}

    raw = await request.body()
    if not raw.strip():
        return {}

    if content_type.startswith("application/json") or content_type.endswith("+json"):
        try:
            body = json.loads(raw)
        except ValueError:
            raise ValidationError("invalid JSON body")
        if body is None:
            return {}
        if not isinstance(body, dict):
            raise ValidationError("request body must be an object")
        return body

    return {}
