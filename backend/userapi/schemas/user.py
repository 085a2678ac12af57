# backend/userapi/schemas/user.py

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UserFields(BaseModel):
    """Incoming user fields, keyed by their wire names (JSON or form)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    username: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = Field(default=None, alias="userrole")
    employee_code: Optional[str] = Field(default=None, alias="employeecode")
    leave_approver: Optional[str] = Field(default=None, alias="leaveApprover")
    # parsed by the service so a bad value maps to "invalid requestDate"
    request_date: Optional[Any] = Field(default=None, alias="requestDate")
    approver_name: Optional[str] = Field(default=None, alias="approverName")

    @field_validator("leave_approver", mode="before")
    @classmethod
    def approver_id_to_str(cls, v):
        # approver may be sent as a numeric user id
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class UserCreate(UserFields):
    pass


class UserUpdate(UserFields):
    def changes(self) -> Dict[str, Any]:
        """Supplied fields only; falsy values (null, "", 0) mean "leave unchanged"."""
        out: Dict[str, Any] = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if not value:
                continue
            out[name] = value
        return out


class UserOut(BaseModel):
    """Sanitized user: every stored field except the password hash."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    username: str
    role: str = Field(alias="userrole")
    employee_code: Optional[str] = Field(default=None, alias="employeecode")
    leave_approver: Optional[str] = Field(default=None, alias="leaveApprover")
    request_date: Optional[datetime] = Field(default=None, alias="requestDate")
    approver_name: Optional[str] = Field(default=None, alias="approverName")
