from typing import Optional
from sqlmodel import Field, SQLModel
from datetime import datetime

from blogsphere.core.timeutils import utcnow

class UserBase(SQLModel):
    name: str
    email: str = Field(unique=True, index=True)

    # Profile
    profile_picture: Optional[str] = None  # Bare storage key, e.g. "uploads/profile_pictures/<hash>.jpg"
    bio: Optional[str] = None


class User(UserBase, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    password_hash: str

    # Never serialized: see UserRead
    is_admin: bool = Field(default=False)

    # Soft delete
    deleted_at: Optional[datetime] = Field(default=None, index=True)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class UserRead(UserBase):
    id: int
    created_at: datetime
    updated_at: datetime
