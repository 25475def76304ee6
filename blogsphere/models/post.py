from typing import Optional
from datetime import datetime
from sqlmodel import Field, SQLModel

from blogsphere.core.timeutils import utcnow

CONTENT_MAX_LENGTH = 2000

class Post(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    # References
    blog_id: int = Field(foreign_key="blog.id", index=True, ondelete="CASCADE")
    owner_id: int = Field(foreign_key="user.id", index=True, ondelete="CASCADE")  # Authoring user

    # Content
    content: Optional[str] = Field(default=None, max_length=CONTENT_MAX_LENGTH)
    image_url: Optional[str] = None  # Public URL, e.g. "/storage/uploads/posts/<hash>.png"
    type: Optional[str] = Field(default="text")  # text, image, poll... advisory only

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
