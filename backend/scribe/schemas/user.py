from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from scribe.models.user import UserRole


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    full_name: Optional[str] = None
    role: UserRole
    is_active: bool
    created_at: datetime
