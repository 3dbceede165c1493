from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy import Column, DateTime
from sqlmodel import Enum as SQLEnum, Field, SQLModel


class UserRole(str, Enum):
    admin = "admin"
    editor = "editor"
    user = "user"


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True, nullable=False)
    full_name: Optional[str] = Field(default=None)
    hashed_password: str
    role: UserRole = Field(
        default=UserRole.user,
        sa_column=Column(SQLEnum(UserRole, name="user_role"), nullable=False, server_default=UserRole.user.value),
    )
    is_active: bool = Field(default=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
