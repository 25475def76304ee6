from typing import List
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select, delete

from blogsphere.core.errors import ConflictError, NotFoundError
from blogsphere.core.logging import get_logger
from blogsphere.models.blog import Blog
from blogsphere.models.subscription import BlogSubscription
from blogsphere.models.user import User
from blogsphere.services.folder import FolderService

logger = get_logger("subscription")

ALREADY_SUBSCRIBED = "Already subscribed to this blog."


class SubscriptionService:
    def __init__(self, session: Session):
        self.session = session

    def _get_blog(self, blog_id: int) -> Blog:
        blog = self.session.get(Blog, blog_id)
        if not blog:
            raise NotFoundError("Blog not found.")
        return blog

    def list_subscriptions(self, user: User) -> List[Blog]:
        return self.session.exec(
            select(Blog)
            .join(BlogSubscription, BlogSubscription.blog_id == Blog.id)
            .where(BlogSubscription.user_id == user.id)
            .order_by(Blog.id)
        ).all()

    def is_subscribed(self, user: User, blog_id: int) -> bool:
        return self.session.exec(
            select(BlogSubscription).where(
                BlogSubscription.user_id == user.id,
                BlogSubscription.blog_id == blog_id
            )
        ).first() is not None

    def subscribe(self, user: User, blog_id: int) -> None:
        blog = self._get_blog(blog_id)
        if self.is_subscribed(user, blog.id):
            raise ConflictError(ALREADY_SUBSCRIBED)

        self.session.add(BlogSubscription(user_id=user.id, blog_id=blog.id))
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise ConflictError(ALREADY_SUBSCRIBED)

    def unsubscribe(self, user: User, blog_id: int) -> None:
        """Drop the subscription and take the blog out of the user's folders."""
        blog = self._get_blog(blog_id)
        self.session.exec(
            delete(BlogSubscription).where(
                BlogSubscription.user_id == user.id,
                BlogSubscription.blog_id == blog.id
            )
        )
        FolderService(self.session).purge_blog(blog.id, user=user)
        self.session.commit()
        logger.info("User %s unsubscribed from blog %s", user.id, blog.id)
