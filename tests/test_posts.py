from sqlmodel import select

from blogsphere.models import Comment, Post
from blogsphere.models.post import CONTENT_MAX_LENGTH
from blogsphere.services.post import REMOVAL_NOTICE, PostService
from blogsphere.services.media import UploadedMedia
from conftest import auth_headers


def test_create_post(client, session, make_user, make_blog):
    user = make_user()
    blog = make_blog(owner=user)

    response = client.post(
        f"/api/v1/blogs/{blog.id}/posts",
        data={"content": "This is a test post content.", "type": "text"},
        headers=auth_headers(user),
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert {"id", "content", "type", "blog_id", "owner_id"} <= set(data)
    assert data["blog_id"] == blog.id
    assert data["owner_id"] == user.id
    assert data["image_url"] is None


def test_create_post_with_media_stores_public_url(client, storage, make_user, make_blog):
    user = make_user()
    blog = make_blog(owner=user)

    response = client.post(
        f"/api/v1/blogs/{blog.id}/posts",
        data={"content": "Spreadsheet attached"},
        files={"image": ("report.pdf", b"%PDF-1.4 report", "application/pdf")},
        headers=auth_headers(user),
    )

    assert response.status_code == 201
    image_url = response.json()["data"]["image_url"]
    assert image_url.startswith("/storage/uploads/posts/")
    assert image_url.endswith(".pdf")
    assert storage.exists(storage.key_from_url(image_url))


def test_zip_upload_is_unsupported_media_type(client, session, make_user, make_blog):
    user = make_user()
    blog = make_blog(owner=user)

    response = client.post(
        f"/api/v1/blogs/{blog.id}/posts",
        data={"content": "Archive"},
        files={"image": ("archive.zip", b"PK\x03\x04", "application/zip")},
        headers=auth_headers(user),
    )

    assert response.status_code == 415
    assert response.json()["message"] == "Invalid file type."
    assert session.exec(select(Post)).all() == []


def test_oversized_upload_is_a_validation_error(client, make_user, make_blog):
    user = make_user()
    blog = make_blog(owner=user)

    response = client.post(
        f"/api/v1/blogs/{blog.id}/posts",
        data={"content": "Too big"},
        files={"image": ("big.png", b"\x00" * (2048 * 1024 + 1), "image/png")},
        headers=auth_headers(user),
    )

    assert response.status_code == 422
    assert "image" in response.json()["data"]


def test_create_post_requires_content(client, make_user, make_blog):
    user = make_user()
    blog = make_blog(owner=user)

    response = client.post(f"/api/v1/blogs/{blog.id}/posts", data={"type": "text"}, headers=auth_headers(user))

    assert response.status_code == 422
    assert response.json()["data"] == {"content": ["The content field is required."]}


def test_only_blog_owner_can_post(client, make_user, make_blog):
    blog = make_blog()

    response = client.post(
        f"/api/v1/blogs/{blog.id}/posts", data={"content": "Not mine"}, headers=auth_headers(make_user())
    )

    assert response.status_code == 401


def test_update_post_keeps_media_when_no_file(session, storage, make_user, make_blog):
    user = make_user()
    blog = make_blog(owner=user)
    service = PostService(session, storage)
    media = UploadedMedia(file_name="a.png", content_type="image/png", content=b"png")
    post = service.create_post(blog, user, "First", media=media)
    url = post.image_url

    post = service.update_post(post, "Second")

    assert post.content == "Second"
    assert post.image_url == url
    assert post.type == "text"


def test_update_post_replaces_media(session, storage, make_user, make_blog):
    user = make_user()
    blog = make_blog(owner=user)
    service = PostService(session, storage)
    post = service.create_post(blog, user, "First", media=UploadedMedia("a.png", "image/png", b"one"))
    old_key = storage.key_from_url(post.image_url)

    post = service.update_post(post, "Second", media=UploadedMedia("b.txt", "text/plain", b"two"), type="note")

    assert not storage.exists(old_key)
    assert storage.exists(storage.key_from_url(post.image_url))
    assert post.type == "note"


def test_update_post_endpoint(client, session, make_user, make_post):
    user = make_user()
    post = make_post(owner=user)

    response = client.post(
        f"/api/v1/posts/{post.id}/update", data={"content": "Updated post content"}, headers=auth_headers(user)
    )

    assert response.status_code == 200
    assert response.json()["data"]["content"] == "Updated post content"


def test_delete_post_removes_media_and_comments(session, storage, make_user, make_blog, make_comment):
    user = make_user()
    blog = make_blog(owner=user)
    service = PostService(session, storage)
    post = service.create_post(blog, user, "With file", media=UploadedMedia("a.png", "image/png", b"png"))
    make_comment(post=post)
    key = storage.key_from_url(post.image_url)
    post_id = post.id

    service.delete_post(post)

    assert not storage.exists(key)
    assert session.get(Post, post_id) is None
    assert session.exec(select(Comment).where(Comment.post_id == post_id)).all() == []


def test_delete_post_of_someone_else(client, make_user, make_post):
    post = make_post()

    response = client.delete(f"/api/v1/posts/{post.id}", headers=auth_headers(make_user()))

    assert response.status_code == 401


def test_tombstone_commits_scrubbed_row_before_delete(session, storage, make_user, make_blog):
    user = make_user()
    blog = make_blog(owner=user)
    service = PostService(session, storage)
    post = service.create_post(blog, user, "Sensitive", media=UploadedMedia("a.png", "image/png", b"png"))
    key = storage.key_from_url(post.image_url)
    post_id = post.id
    seen = []

    original_delete = service.delete_post

    def spy(p):
        seen.append((p.content, p.image_url))
        original_delete(p)

    service.delete_post = spy
    service.tombstone_and_delete(post)

    assert seen == [("Sensitive" + REMOVAL_NOTICE, "")]
    assert session.get(Post, post_id) is None
    assert not storage.exists(key)


def test_list_posts_for_blog(client, make_user, make_blog, make_post):
    user = make_user()
    blog = make_blog(owner=user)
    for _ in range(3):
        make_post(blog=blog)
    make_post()

    response = client.get(f"/api/v1/blogs/{blog.id}/posts", headers=auth_headers(user))

    assert response.status_code == 200
    assert len(response.json()["data"]) == 3


def test_show_post(client, make_user, make_post):
    post = make_post(content="Shown")

    response = client.get(f"/api/v1/posts/{post.id}", headers=auth_headers(make_user()))

    assert response.status_code == 200
    assert response.json()["data"]["content"] == "Shown"


def test_tombstone_of_full_length_post_fits_content_column(session, storage, make_user, make_blog):
    user = make_user()
    blog = make_blog(owner=user)
    service = PostService(session, storage)
    post = service.create_post(blog, user, "x" * CONTENT_MAX_LENGTH)
    seen = []

    original_delete = service.delete_post

    def spy(p):
        seen.append(p.content)
        original_delete(p)

    service.delete_post = spy
    service.tombstone_and_delete(post)

    assert len(seen[0]) <= CONTENT_MAX_LENGTH
    assert seen[0].endswith(REMOVAL_NOTICE)


def test_tombstone_keeps_short_content_whole(session, storage, make_user, make_blog):
    user = make_user()
    blog = make_blog(owner=user)
    service = PostService(session, storage)
    post = service.create_post(blog, user, "Short post")
    seen = []

    original_delete = service.delete_post

    def spy(p):
        seen.append(p.content)
        original_delete(p)

    service.delete_post = spy
    service.tombstone_and_delete(post)

    assert seen == ["Short post" + REMOVAL_NOTICE]
