from typing import List, Optional
from sqlmodel import Session, select, delete

from blogsphere.core.errors import NotFoundError, UnauthorizedError, ValidationError
from blogsphere.core.timeutils import utcnow
from blogsphere.core.logging import get_logger
from blogsphere.models.blog import Blog
from blogsphere.models.comment import Comment
from blogsphere.models.post import CONTENT_MAX_LENGTH, Post
from blogsphere.models.user import User
from blogsphere.services import policy
from blogsphere.services.media import POSTS_DIR, UploadedMedia, validate_post_media
from blogsphere.services.storage import Storage, discard

logger = get_logger("post")

REMOVAL_NOTICE = " [This image has been removed.]"


class PostService:
    def __init__(self, session: Session, storage: Storage):
        self.session = session
        self.storage = storage

    def list_posts(self, blog_id: Optional[int] = None) -> List[Post]:
        query = select(Post).order_by(Post.id)
        if blog_id is not None:
            query = query.where(Post.blog_id == blog_id)
        return self.session.exec(query).all()

    def get_post(self, post_id: int) -> Post:
        post = self.session.get(Post, post_id)
        if not post:
            raise NotFoundError("Post not found.")
        return post

    def get_post_for_owner(self, post_id: int, actor: User) -> Post:
        post = self.get_post(post_id)
        if not policy.owns_post(actor, post):
            raise UnauthorizedError("Unauthorized.")
        return post

    def _validate(self, content: Optional[str], media: Optional[UploadedMedia]) -> None:
        if content is None or not content.strip():
            raise ValidationError.for_field("content", "The content field is required.")
        if len(content) > CONTENT_MAX_LENGTH:
            raise ValidationError.for_field(
                "content", f"The content field must not be greater than {CONTENT_MAX_LENGTH} characters."
            )
        if media is not None:
            validate_post_media("image", media)

    def _store(self, media: UploadedMedia) -> str:
        key = self.storage.put(POSTS_DIR, media.content, media.file_name, media.content_type)
        return self.storage.public_url(key)

    def _discard_media(self, post: Post) -> None:
        if post.image_url:
            discard(self.storage, self.storage.key_from_url(post.image_url))

    def create_post(
        self,
        blog: Blog,
        author: User,
        content: Optional[str],
        media: Optional[UploadedMedia] = None,
        type: Optional[str] = None,
    ) -> Post:
        if not policy.owns_blog(author, blog):
            raise UnauthorizedError("Unauthorized.")
        self._validate(content, media)

        post = Post(
            blog_id=blog.id,
            owner_id=author.id,
            content=content,
            image_url=self._store(media) if media is not None else None,
            type=type or "text",
        )
        self.session.add(post)
        self.session.commit()
        self.session.refresh(post)
        return post

    def update_post(
        self,
        post: Post,
        content: Optional[str],
        media: Optional[UploadedMedia] = None,
        type: Optional[str] = None,
    ) -> Post:
        self._validate(content, media)

        # Without a new file the existing URL is kept
        if media is not None:
            self._discard_media(post)
            post.image_url = self._store(media)

        post.content = content
        if type is not None:
            post.type = type
        post.updated_at = utcnow()
        self.session.add(post)
        self.session.commit()
        self.session.refresh(post)
        return post

    def delete_post(self, post: Post) -> None:
        self._discard_media(post)
        self.session.exec(delete(Comment).where(Comment.post_id == post.id))
        self.session.delete(post)
        self.session.commit()

    def tombstone_and_delete(self, post: Post) -> None:
        """Moderator delete. The scrubbed row (removal notice appended, media
        cleared) is committed before the row is removed."""
        media_url = post.image_url
        # Notice always fits: the body is cut to make room for it
        body = (post.content or "")[:CONTENT_MAX_LENGTH - len(REMOVAL_NOTICE)]
        post.content = body + REMOVAL_NOTICE
        post.image_url = ""
        post.updated_at = utcnow()
        self.session.add(post)
        self.session.commit()
        logger.info("Tombstoned post %s (media %s)", post.id, media_url or "none")

        if media_url:
            discard(self.storage, self.storage.key_from_url(media_url))
        self.delete_post(post)
