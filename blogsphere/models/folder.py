from typing import Optional
from datetime import datetime
from sqlmodel import Field, SQLModel
from sqlalchemy import UniqueConstraint

from blogsphere.core.timeutils import utcnow

NAME_MAX_LENGTH = 255

class Folder(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=NAME_MAX_LENGTH)
    user_id: int = Field(foreign_key="user.id", index=True, ondelete="CASCADE")

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class FolderBlog(SQLModel, table=True):
    """Folder membership. user_id mirrors folder.user_id so the index below
    can reject a blog filed twice by the same user."""

    __tablename__ = "folder_blog"
    __table_args__ = (UniqueConstraint("user_id", "blog_id", name="uq_folder_blog_user_blog"),)

    folder_id: int = Field(foreign_key="folder.id", primary_key=True, ondelete="CASCADE")
    blog_id: int = Field(foreign_key="blog.id", primary_key=True, ondelete="CASCADE")
    user_id: int = Field(foreign_key="user.id", index=True, ondelete="CASCADE")
