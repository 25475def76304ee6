from typing import Dict, List, Optional
from sqlmodel import Session, select, or_

from blogsphere.core.errors import NotFoundError, UnauthorizedError
from blogsphere.core.timeutils import utcnow
from blogsphere.models.comment import Comment
from blogsphere.models.post import Post
from blogsphere.models.user import User, UserRead
from blogsphere.services import policy


class CommentService:
    def __init__(self, session: Session):
        self.session = session

    def get_comment(self, comment_id: int) -> Comment:
        comment = self.session.get(Comment, comment_id)
        if not comment:
            raise NotFoundError("Comment not found.")
        return comment

    def _post_of(self, comment: Comment) -> Post:
        return self.session.get(Post, comment.post_id)

    def create_comment(self, post: Post, author: User, content: str) -> Comment:
        comment = Comment(post_id=post.id, user_id=author.id, content=content, is_visible=True)
        self.session.add(comment)
        self.session.commit()
        self.session.refresh(comment)
        return comment

    def list_visible(self, post: Post, viewer: Optional[User]) -> List[Comment]:
        """Comments of a post as seen by viewer (None for anonymous)."""
        query = select(Comment).where(Comment.post_id == post.id).order_by(Comment.id)
        if not policy.owns_post(viewer, post):
            if viewer is None:
                query = query.where(Comment.is_visible == True)
            else:
                query = query.where(or_(Comment.is_visible == True, Comment.user_id == viewer.id))
        comments = self.session.exec(query).all()
        return [c for c in comments if policy.can_view_comment(viewer, c, post)]

    def update_comment(self, comment: Comment, actor: User, content: str) -> Comment:
        if not policy.can_edit_comment(actor, comment):
            raise UnauthorizedError("Unauthorized.")
        comment.content = content
        comment.updated_at = utcnow()
        self.session.add(comment)
        self.session.commit()
        self.session.refresh(comment)
        return comment

    def delete_comment(self, comment: Comment, actor: Optional[User] = None) -> None:
        """actor None means a moderator delete with no ownership check."""
        if actor is not None and not policy.can_moderate_comment(actor, comment, self._post_of(comment)):
            raise UnauthorizedError("Unauthorized.")
        self.session.delete(comment)
        self.session.commit()

    def toggle_visibility(self, comment: Comment, actor: User) -> Comment:
        if not policy.can_moderate_comment(actor, comment, self._post_of(comment)):
            raise UnauthorizedError("Unauthorized to toggle comment visibility.")
        comment.is_visible = not comment.is_visible
        comment.updated_at = utcnow()
        self.session.add(comment)
        self.session.commit()
        self.session.refresh(comment)
        return comment

    def list_with_relations(self) -> List[Dict]:
        """Every comment with its post and author, for moderation."""
        rows = self.session.exec(
            select(Comment, Post, User)
            .join(Post, Post.id == Comment.post_id)
            .join(User, User.id == Comment.user_id)
            .order_by(Comment.id)
        ).all()
        result = []
        for comment, post, user in rows:
            data = comment.model_dump()
            data["post"] = post.model_dump()
            data["user"] = UserRead.model_validate(user).model_dump()
            result.append(data)
        return result
