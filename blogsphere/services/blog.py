from typing import Dict, List, Optional
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select, delete

from blogsphere.core.errors import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from blogsphere.core.timeutils import utcnow
from blogsphere.core.logging import get_logger
from blogsphere.models.blog import Blog
from blogsphere.models.comment import Comment
from blogsphere.models.post import Post
from blogsphere.models.subscription import BlogSubscription
from blogsphere.models.user import User
from blogsphere.services import policy
from blogsphere.services.folder import FolderService
from blogsphere.services.media import BLOG_IMAGES_DIR, BLOG_LOGOS_DIR, UploadedMedia, validate_image
from blogsphere.services.storage import Storage, discard

logger = get_logger("blog")

ONE_BLOG_PER_USER = "User can only have one blog."
FIELD_MAX_LENGTH = 255


class BlogService:
    def __init__(self, session: Session, storage: Storage):
        self.session = session
        self.storage = storage

    def list_blogs(self) -> List[Blog]:
        return self.session.exec(select(Blog).order_by(Blog.id)).all()

    def get_blog(self, blog_id: int) -> Blog:
        blog = self.session.get(Blog, blog_id)
        if not blog:
            raise NotFoundError("Blog not found.")
        return blog

    def get_blog_for_owner(self, blog_id: int, actor: User) -> Blog:
        blog = self.get_blog(blog_id)
        if not policy.owns_blog(actor, blog):
            raise UnauthorizedError("Unauthorized.")
        return blog

    def get_owned_blog(self, owner: User) -> Optional[Blog]:
        return self.session.exec(select(Blog).where(Blog.owner_id == owner.id)).first()

    def _validate_fields(self, fields: Dict[str, Optional[str]], required: bool) -> None:
        errors = {}
        for field, value in fields.items():
            if value is None or not value.strip():
                if required or value is not None:
                    errors[field] = [f"The {field} field is required."]
            elif len(value) > FIELD_MAX_LENGTH:
                errors[field] = [f"The {field} field must not be greater than {FIELD_MAX_LENGTH} characters."]
        if errors:
            raise ValidationError(data=errors)

    def _store(self, directory: str, media: UploadedMedia) -> str:
        return self.storage.put(directory, media.content, media.file_name, media.content_type)

    def create_blog(
        self,
        owner: User,
        name: Optional[str],
        description: Optional[str],
        image: Optional[UploadedMedia] = None,
        logo: Optional[UploadedMedia] = None,
    ) -> Blog:
        # Checked before any field validation
        if self.get_owned_blog(owner):
            raise ConflictError(ONE_BLOG_PER_USER, {"error": [ONE_BLOG_PER_USER]})

        self._validate_fields({"name": name, "description": description}, required=True)
        if image is not None:
            validate_image("image", image)
        if logo is not None:
            validate_image("logo", logo)

        blog = Blog(name=name, description=description, owner_id=owner.id)
        if image is not None:
            blog.image = self._store(BLOG_IMAGES_DIR, image)
        if logo is not None:
            blog.logo = self._store(BLOG_LOGOS_DIR, logo)

        self.session.add(blog)
        try:
            self.session.commit()
        except IntegrityError:
            # owner_id is unique: a concurrent create got there first
            self.session.rollback()
            discard(self.storage, blog.image)
            discard(self.storage, blog.logo)
            raise ConflictError(ONE_BLOG_PER_USER, {"error": [ONE_BLOG_PER_USER]})
        self.session.refresh(blog)
        logger.info("User %s created blog %s", owner.id, blog.id)
        return blog

    def update_blog(
        self,
        blog: Blog,
        name: Optional[str] = None,
        description: Optional[str] = None,
        image: Optional[UploadedMedia] = None,
        logo: Optional[UploadedMedia] = None,
    ) -> Blog:
        """Partial update: fields left as None are not touched."""
        self._validate_fields({"name": name, "description": description}, required=False)
        if image is not None:
            validate_image("image", image)
        if logo is not None:
            validate_image("logo", logo)

        if name is not None: blog.name = name
        if description is not None: blog.description = description

        if image is not None:
            discard(self.storage, blog.image)
            blog.image = self._store(BLOG_IMAGES_DIR, image)
        if logo is not None:
            discard(self.storage, blog.logo)
            blog.logo = self._store(BLOG_LOGOS_DIR, logo)

        blog.updated_at = utcnow()
        self.session.add(blog)
        self.session.commit()
        self.session.refresh(blog)
        return blog

    def delete_blog(self, blog: Blog) -> None:
        discard(self.storage, blog.image)
        discard(self.storage, blog.logo)

        posts = self.session.exec(select(Post).where(Post.blog_id == blog.id)).all()
        for post in posts:
            if post.image_url:
                discard(self.storage, self.storage.key_from_url(post.image_url))
        post_ids = [post.id for post in posts]
        if post_ids:
            self.session.exec(delete(Comment).where(Comment.post_id.in_(post_ids)))
            self.session.exec(delete(Post).where(Post.id.in_(post_ids)))

        FolderService(self.session).purge_blog(blog.id)
        self.session.exec(delete(BlogSubscription).where(BlogSubscription.blog_id == blog.id))

        blog_id = blog.id
        self.session.delete(blog)
        self.session.commit()
        logger.info("Deleted blog %s with %d posts", blog_id, len(post_ids))
