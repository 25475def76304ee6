# Import all models to register them with SQLModel
from blogsphere.models.user import User, UserRead
from blogsphere.models.blog import Blog
from blogsphere.models.post import Post
from blogsphere.models.comment import Comment
from blogsphere.models.folder import Folder, FolderBlog
from blogsphere.models.subscription import BlogSubscription

__all__ = [
    "User",
    "UserRead",
    "Blog",
    "Post",
    "Comment",
    "Folder",
    "FolderBlog",
    "BlogSubscription",
]
