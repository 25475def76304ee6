from typing import Optional
from datetime import datetime
from sqlmodel import Field, SQLModel

from blogsphere.core.timeutils import utcnow

class Blog(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    # Owner: unique, so a user can hold at most one blog
    owner_id: int = Field(foreign_key="user.id", unique=True, index=True, ondelete="CASCADE")

    # Content
    name: str = Field(max_length=255)
    description: str = Field(max_length=255)

    # Images (bare storage keys)
    image: Optional[str] = None
    logo: Optional[str] = None

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
