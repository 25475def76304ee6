"""Ownership and visibility predicates.

Every handler and service asks these instead of comparing ids inline, so the
comment read filter and the visibility toggle agree on who owns a post.
"""

from typing import Optional

from blogsphere.models.blog import Blog
from blogsphere.models.comment import Comment
from blogsphere.models.folder import Folder
from blogsphere.models.post import Post
from blogsphere.models.user import User


def is_admin(user: Optional[User]) -> bool:
    return bool(user and user.is_admin and not user.is_deleted)


def owns_blog(user: Optional[User], blog: Blog) -> bool:
    return user is not None and blog.owner_id == user.id


def owns_post(user: Optional[User], post: Post) -> bool:
    return user is not None and post.owner_id == user.id


def owns_folder(user: Optional[User], folder: Folder) -> bool:
    return user is not None and folder.user_id == user.id


def can_edit_comment(user: Optional[User], comment: Comment) -> bool:
    return user is not None and comment.user_id == user.id


def can_moderate_comment(user: Optional[User], comment: Comment, post: Post) -> bool:
    """Author of the comment or owner of the post it belongs to."""
    return can_edit_comment(user, comment) or owns_post(user, post)


def can_view_comment(user: Optional[User], comment: Comment, post: Post) -> bool:
    return comment.is_visible or can_moderate_comment(user, comment, post)
