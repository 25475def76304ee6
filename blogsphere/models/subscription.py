from typing import Optional
from datetime import datetime
from sqlmodel import Field, SQLModel
from sqlalchemy import UniqueConstraint

from blogsphere.core.timeutils import utcnow

class BlogSubscription(SQLModel, table=True):
    __tablename__ = "blog_user"
    # A user can only subscribe once to a blog
    __table_args__ = (UniqueConstraint("user_id", "blog_id", name="uq_blog_user_user_blog"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True, ondelete="CASCADE")
    blog_id: int = Field(foreign_key="blog.id", index=True, ondelete="CASCADE")

    created_at: datetime = Field(default_factory=utcnow)
