from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from pydantic import BaseModel, Field

from blogsphere.core.responses import send_response
from blogsphere.db.session import get_session
from blogsphere.models.post import CONTENT_MAX_LENGTH
from blogsphere.models.user import User
from blogsphere.routers.auth import get_current_user, get_current_user_optional
from blogsphere.services.comment import CommentService
from blogsphere.services.post import PostService
from blogsphere.services.storage import Storage, get_storage

router = APIRouter()

class CommentIn(BaseModel):
    content: str = Field(min_length=1, max_length=CONTENT_MAX_LENGTH)

def get_comment_service(session: Session = Depends(get_session)) -> CommentService:
    return CommentService(session)

def get_post_service(
    session: Session = Depends(get_session),
    storage: Storage = Depends(get_storage),
) -> PostService:
    return PostService(session, storage)


@router.post("/posts/{post_id}/comments")
def create_comment(
    post_id: int,
    comment_in: CommentIn,
    current_user: User = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
    post_service: PostService = Depends(get_post_service)
):
    post = post_service.get_post(post_id)
    comment = service.create_comment(post, current_user, comment_in.content)
    return send_response(comment, "Comment created successfully.", status.HTTP_201_CREATED)


@router.get("/posts/{post_id}/comments")
def list_comments(
    post_id: int,
    current_user: Optional[User] = Depends(get_current_user_optional),
    service: CommentService = Depends(get_comment_service),
    post_service: PostService = Depends(get_post_service)
):
    """
    Hidden comments are only returned to their author and to the post owner.
    """
    post = post_service.get_post(post_id)
    return send_response(service.list_visible(post, current_user), "Comments retrieved successfully.")


@router.post("/comments/{comment_id}/update")
def update_comment(
    comment_id: int,
    comment_in: CommentIn,
    current_user: User = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service)
):
    comment = service.get_comment(comment_id)
    comment = service.update_comment(comment, current_user, comment_in.content)
    return send_response(comment, "Comment updated successfully.")


@router.delete("/comments/{comment_id}")
def delete_comment(
    comment_id: int,
    current_user: User = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service)
):
    comment = service.get_comment(comment_id)
    service.delete_comment(comment, current_user)
    return send_response([], "Comment deleted successfully.")


@router.put("/comments/{comment_id}/toggle")
def toggle_comment_visibility(
    comment_id: int,
    current_user: User = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service)
):
    comment = service.get_comment(comment_id)
    comment = service.toggle_visibility(comment, current_user)
    return send_response({"is_visible": comment.is_visible}, "Comment visibility toggled.")
