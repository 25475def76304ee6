import itertools

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from blogsphere.core.security import create_access_token, get_password_hash
from blogsphere.db.session import get_session
from blogsphere.main import app
from blogsphere.models import Blog, Comment, Folder, FolderBlog, Post, User
from blogsphere.services.storage import LocalStorage, get_storage

PASSWORD = "password123"
_password_hash = None


def password_hash():
    global _password_hash
    if _password_hash is None:
        _password_hash = get_password_hash(PASSWORD)
    return _password_hash


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(str(tmp_path / "storage"))


@pytest.fixture
def client(session, storage):
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token({'sub': str(user.id)})}"}


def _save(session, obj):
    session.add(obj)
    session.commit()
    session.refresh(obj)
    return obj


@pytest.fixture
def make_user(session):
    counter = itertools.count(1)

    def _make(**overrides):
        n = next(counter)
        data = {"name": f"User {n}", "email": f"user{n}@example.com", "password_hash": password_hash()}
        data.update(overrides)
        return _save(session, User(**data))

    return _make


@pytest.fixture
def make_blog(session, make_user):
    def _make(owner=None, **overrides):
        owner = owner or make_user()
        data = {"name": f"Blog of {owner.name}", "description": "A blog", "owner_id": owner.id}
        data.update(overrides)
        return _save(session, Blog(**data))

    return _make


@pytest.fixture
def make_post(session, make_blog):
    def _make(blog=None, owner=None, **overrides):
        blog = blog or make_blog(owner=owner)
        data = {"blog_id": blog.id, "owner_id": owner.id if owner else blog.owner_id, "content": "Hello", "type": "text"}
        data.update(overrides)
        return _save(session, Post(**data))

    return _make


@pytest.fixture
def make_comment(session, make_user, make_post):
    def _make(post=None, author=None, **overrides):
        post = post or make_post()
        author = author or make_user()
        data = {"post_id": post.id, "user_id": author.id, "content": "Nice post", "is_visible": True}
        data.update(overrides)
        return _save(session, Comment(**data))

    return _make


@pytest.fixture
def make_folder(session):
    def _make(user, blogs=(), name="Reading list"):
        folder = _save(session, Folder(name=name, user_id=user.id))
        for blog in blogs:
            session.add(FolderBlog(folder_id=folder.id, blog_id=blog.id, user_id=user.id))
        session.commit()
        return folder

    return _make
