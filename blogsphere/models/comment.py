from typing import Optional
from datetime import datetime
from sqlmodel import Field, SQLModel

from blogsphere.core.timeutils import utcnow
from blogsphere.models.post import CONTENT_MAX_LENGTH

class Comment(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    # References
    post_id: int = Field(foreign_key="post.id", index=True, ondelete="CASCADE")
    user_id: int = Field(foreign_key="user.id", index=True, ondelete="CASCADE")  # Author

    # Content
    content: str = Field(max_length=CONTENT_MAX_LENGTH)

    # Moderation
    is_visible: bool = Field(default=True)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
