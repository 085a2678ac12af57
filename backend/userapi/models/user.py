from sqlalchemy import Column, DateTime, Integer, String
from userapi.core.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    username = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)

    # free-form, e.g. "admin" | "employee"
    role = Column(String, nullable=False)

    employee_code = Column(String, nullable=True)
    leave_approver = Column(String, nullable=True)
    request_date = Column(DateTime, nullable=True)
    approver_name = Column(String, nullable=True)
