from typing import Dict, List, Optional
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select, func, delete

from blogsphere.core.config import settings
from blogsphere.core.errors import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from blogsphere.core.timeutils import utcnow
from blogsphere.core.logging import get_logger
from blogsphere.models.blog import Blog
from blogsphere.models.folder import NAME_MAX_LENGTH, Folder, FolderBlog
from blogsphere.models.user import User
from blogsphere.services import policy

logger = get_logger("folder")

ALREADY_FILED = "This blog is already in another folder."


class FolderService:
    def __init__(self, session: Session):
        self.session = session

    def get_folder(self, folder_id: int) -> Folder:
        folder = self.session.get(Folder, folder_id)
        if not folder:
            raise NotFoundError("Folder not found.")
        return folder

    def get_folder_blogs(self, folder_id: int) -> List[Blog]:
        return self.session.exec(
            select(Blog)
            .join(FolderBlog, FolderBlog.blog_id == Blog.id)
            .where(FolderBlog.folder_id == folder_id)
            .order_by(Blog.id)
        ).all()

    def serialize(self, folder: Folder) -> Dict:
        data = folder.model_dump()
        data["blogs"] = [blog.model_dump() for blog in self.get_folder_blogs(folder.id)]
        return data

    def list_folders(self, user: User) -> List[Dict]:
        folders = self.session.exec(
            select(Folder).where(Folder.user_id == user.id).order_by(Folder.id)
        ).all()
        return [self.serialize(folder) for folder in folders]

    def _existing_blog(self, blog_id: Optional[int]) -> Blog:
        if blog_id is None:
            raise ValidationError.for_field("blog_id", "The blog id field is required.")
        blog = self.session.get(Blog, blog_id)
        if not blog:
            raise ValidationError.for_field("blog_id", "The selected blog id is invalid.")
        return blog

    def is_filed(self, user: User, blog_id: int) -> bool:
        """Whether the blog already sits in a folder, within the configured scope."""
        query = select(FolderBlog).where(FolderBlog.blog_id == blog_id)
        if settings.FOLDER_UNIQUENESS_SCOPE == "user":
            query = query.where(FolderBlog.user_id == user.id)
        return self.session.exec(query).first() is not None

    def _attach(self, folder: Folder, blog_id: int) -> None:
        self.session.add(FolderBlog(folder_id=folder.id, blog_id=blog_id, user_id=folder.user_id))
        folder.updated_at = utcnow()
        self.session.add(folder)
        try:
            self.session.commit()
        except IntegrityError:
            # Lost a race with a concurrent attach of the same blog
            self.session.rollback()
            raise ConflictError(ALREADY_FILED, {"blog_id": [ALREADY_FILED]})

    def create_folder(self, user: User, name: Optional[str], blog_id: Optional[int]) -> Dict:
        if not name or not name.strip():
            raise ValidationError.for_field("name", "The name field is required.")
        if len(name.strip()) > NAME_MAX_LENGTH:
            raise ValidationError.for_field(
                "name", f"The name field must not be greater than {NAME_MAX_LENGTH} characters."
            )
        blog = self._existing_blog(blog_id)
        if self.is_filed(user, blog.id):
            raise ConflictError(ALREADY_FILED, {"blog_id": [ALREADY_FILED]})

        folder = Folder(name=name.strip(), user_id=user.id)
        self.session.add(folder)
        self.session.flush()
        self._attach(folder, blog.id)
        self.session.refresh(folder)
        logger.info("User %s created folder %s with blog %s", user.id, folder.id, blog.id)
        return self.serialize(folder)

    def add_blog(self, folder_id: int, blog_id: Optional[int], actor: User) -> Dict:
        blog = self._existing_blog(blog_id)
        folder = self.get_folder(folder_id)
        if not policy.owns_folder(actor, folder):
            raise UnauthorizedError("Unauthorized.")
        if self.is_filed(actor, blog.id):
            raise ConflictError(ALREADY_FILED, {"blog_id": [ALREADY_FILED]})

        self._attach(folder, blog.id)
        self.session.refresh(folder)
        return self.serialize(folder)

    def remove_blog(self, folder_id: int, blog_id: Optional[int], actor: User) -> None:
        blog = self._existing_blog(blog_id)
        folder = self.get_folder(folder_id)
        if not policy.owns_folder(actor, folder):
            raise UnauthorizedError("Unauthorized.")

        self.session.exec(
            delete(FolderBlog).where(FolderBlog.folder_id == folder.id, FolderBlog.blog_id == blog.id)
        )
        self.prune_if_empty(folder)
        self.session.commit()

    def prune_if_empty(self, folder: Folder) -> bool:
        """Delete a folder left without blogs. Caller commits."""
        remaining = self.session.exec(
            select(func.count()).select_from(FolderBlog).where(FolderBlog.folder_id == folder.id)
        ).one()
        if remaining:
            return False
        self.session.delete(folder)
        logger.info("Deleted empty folder %s", folder.id)
        return True

    def purge_blog(self, blog_id: int, user: Optional[User] = None) -> None:
        """Remove a blog from every folder (of one user, or of everyone) and
        prune the folders this empties. Caller commits."""
        query = select(Folder).join(FolderBlog, FolderBlog.folder_id == Folder.id).where(FolderBlog.blog_id == blog_id)
        if user is not None:
            query = query.where(Folder.user_id == user.id)
        folders = self.session.exec(query).all()
        for folder in folders:
            self.session.exec(
                delete(FolderBlog).where(FolderBlog.folder_id == folder.id, FolderBlog.blog_id == blog_id)
            )
            self.prune_if_empty(folder)
