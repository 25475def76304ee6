from fastapi import APIRouter, Depends
from sqlmodel import Session

from blogsphere.core.errors import UnauthorizedError
from blogsphere.core.responses import send_response
from blogsphere.db.session import get_session
from blogsphere.models.user import User, UserRead
from blogsphere.routers.auth import get_current_user
from blogsphere.services import policy
from blogsphere.services.blog import BlogService
from blogsphere.services.comment import CommentService
from blogsphere.services.post import PostService
from blogsphere.services.storage import Storage, get_storage
from blogsphere.services.upload import UploadFolder, UploadService
from blogsphere.services.user import UserService


def get_admin_user(current_user: User = Depends(get_current_user)) -> User:
    """Gate for every admin endpoint; runs before any parameter is looked at."""
    if not policy.is_admin(current_user):
        raise UnauthorizedError("Unauthorized.")
    return current_user


router = APIRouter(dependencies=[Depends(get_admin_user)])


def get_blog_service(session: Session = Depends(get_session), storage: Storage = Depends(get_storage)) -> BlogService:
    return BlogService(session, storage)

def get_post_service(session: Session = Depends(get_session), storage: Storage = Depends(get_storage)) -> PostService:
    return PostService(session, storage)

def get_comment_service(session: Session = Depends(get_session)) -> CommentService:
    return CommentService(session)

def get_user_service(session: Session = Depends(get_session), storage: Storage = Depends(get_storage)) -> UserService:
    return UserService(session, storage)

def get_upload_service(storage: Storage = Depends(get_storage)) -> UploadService:
    return UploadService(storage)


# Blogs
@router.get("/blogs")
def list_blogs(service: BlogService = Depends(get_blog_service)):
    return send_response(service.list_blogs(), "Blogs retrieved successfully.")

@router.delete("/blogs/{blog_id}")
def delete_blog(blog_id: int, service: BlogService = Depends(get_blog_service)):
    service.delete_blog(service.get_blog(blog_id))
    return send_response([], "Blog deleted successfully.")


# Posts
@router.get("/posts")
def list_posts(service: PostService = Depends(get_post_service)):
    return send_response(service.list_posts(), "Posts retrieved successfully.")

@router.delete("/posts/{post_id}")
def delete_post(post_id: int, service: PostService = Depends(get_post_service)):
    """Tombstones the post (removal notice, media cleared) before deleting it."""
    service.tombstone_and_delete(service.get_post(post_id))
    return send_response([], "Post deleted successfully.")


# Comments
@router.get("/comments")
def list_comments(service: CommentService = Depends(get_comment_service)):
    return send_response(service.list_with_relations(), "Comments retrieved successfully.")

@router.delete("/comments/{comment_id}")
def delete_comment(comment_id: int, service: CommentService = Depends(get_comment_service)):
    service.delete_comment(service.get_comment(comment_id))
    return send_response([], "Comment deleted successfully.")


# Users
@router.get("/users")
def list_users(service: UserService = Depends(get_user_service)):
    users = [UserRead.model_validate(user) for user in service.get_all_users()]
    return send_response(users, "Users retrieved successfully.")

@router.delete("/users/{user_id}")
def delete_user(user_id: int, service: UserService = Depends(get_user_service)):
    service.delete_user(service.get_user_by_id(user_id))
    return send_response([], "User deleted successfully.")


# Uploaded files
@router.get("/uploads")
def list_uploads(service: UploadService = Depends(get_upload_service)):
    return send_response(service.list_uploads(), "Uploaded files retrieved successfully.")

@router.delete("/uploads/{folder}/{filename}")
def delete_upload(folder: UploadFolder, filename: str, service: UploadService = Depends(get_upload_service)):
    service.delete_upload(folder, filename)
    return send_response([], "File deleted successfully.")
