from typing import Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlmodel import Session

from blogsphere.core.responses import send_response
from blogsphere.db.session import get_session
from blogsphere.models.user import User
from blogsphere.routers.auth import get_current_user
from blogsphere.services.blog import BlogService
from blogsphere.services.media import read_upload
from blogsphere.services.post import PostService
from blogsphere.services.storage import Storage, get_storage

router = APIRouter()

def get_post_service(
    session: Session = Depends(get_session),
    storage: Storage = Depends(get_storage),
) -> PostService:
    return PostService(session, storage)

def get_blog_service(
    session: Session = Depends(get_session),
    storage: Storage = Depends(get_storage),
) -> BlogService:
    return BlogService(session, storage)


@router.post("/blogs/{blog_id}/posts")
async def create_post(
    blog_id: int,
    content: Optional[str] = Form(None),
    type: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
    blog_service: BlogService = Depends(get_blog_service)
):
    blog = blog_service.get_blog(blog_id)
    post = service.create_post(
        blog,
        current_user,
        content=content,
        media=await read_upload(image),
        type=type,
    )
    return send_response(post, "Post created successfully.", status.HTTP_201_CREATED)


@router.get("/blogs/{blog_id}/posts")
def list_posts(
    blog_id: int,
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
    blog_service: BlogService = Depends(get_blog_service)
):
    blog = blog_service.get_blog(blog_id)
    return send_response(service.list_posts(blog.id), "Posts retrieved successfully.")


@router.get("/posts/{post_id}")
def read_post(
    post_id: int,
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service)
):
    return send_response(service.get_post(post_id), "Post retrieved successfully.")


@router.post("/posts/{post_id}/update")
async def update_post(
    post_id: int,
    content: Optional[str] = Form(None),
    type: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service)
):
    post = service.get_post_for_owner(post_id, current_user)
    post = service.update_post(post, content=content, media=await read_upload(image), type=type)
    return send_response(post, "Post updated successfully.")


@router.delete("/posts/{post_id}")
def delete_post(
    post_id: int,
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service)
):
    post = service.get_post_for_owner(post_id, current_user)
    service.delete_post(post)
    return send_response([], "Post deleted successfully.")
