from sqlmodel import select

from blogsphere.models import BlogSubscription, Folder
from blogsphere.services.subscription import ALREADY_SUBSCRIBED, SubscriptionService
from conftest import auth_headers


def _subscribe(session, user, blog):
    session.add(BlogSubscription(user_id=user.id, blog_id=blog.id))
    session.commit()


def test_list_subscriptions(client, session, make_user, make_blog):
    user = make_user()
    first, second = make_blog(), make_blog()
    make_blog()
    _subscribe(session, user, first)
    _subscribe(session, user, second)

    response = client.get("/api/v1/subscriptions", headers=auth_headers(user))

    assert response.status_code == 200
    assert [b["id"] for b in response.json()["data"]] == [first.id, second.id]


def test_subscribe(client, session, make_user, make_blog):
    user = make_user()
    blog = make_blog()

    response = client.post(f"/api/v1/subscriptions/{blog.id}", headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json()["message"] == "Successfully subscribed to the blog."
    rows = session.exec(select(BlogSubscription).where(BlogSubscription.user_id == user.id)).all()
    assert [row.blog_id for row in rows] == [blog.id]


def test_subscribe_twice_is_a_conflict(client, session, make_user, make_blog):
    user = make_user()
    blog = make_blog()
    _subscribe(session, user, blog)

    response = client.post(f"/api/v1/subscriptions/{blog.id}", headers=auth_headers(user))

    assert response.status_code == 409
    assert response.json()["message"] == ALREADY_SUBSCRIBED


def test_subscribe_to_missing_blog(client, make_user):
    response = client.post("/api/v1/subscriptions/999", headers=auth_headers(make_user()))

    assert response.status_code == 404
    assert response.json()["message"] == "Blog not found."


def test_subscriptions_require_authentication(client):
    response = client.get("/api/v1/subscriptions")

    assert response.status_code == 401


def test_unsubscribe_removes_blog_from_folders(client, session, make_user, make_blog, make_folder):
    user = make_user()
    blog, kept = make_blog(), make_blog()
    _subscribe(session, user, blog)
    emptied = make_folder(user, blogs=[blog], name="Emptied").id
    mixed = make_folder(user, blogs=[kept], name="Mixed").id
    other_user = make_user()
    others = make_folder(other_user, blogs=[blog], name="Someone else").id

    response = client.delete(f"/api/v1/subscriptions/{blog.id}", headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json()["message"] == "Successfully unsubscribed from the blog and removed from folders."
    assert session.exec(select(BlogSubscription).where(BlogSubscription.user_id == user.id)).all() == []
    assert session.get(Folder, emptied) is None
    assert session.get(Folder, mixed) is not None
    assert session.get(Folder, others) is not None


def test_unsubscribe_without_subscription_still_succeeds(client, make_user, make_blog):
    response = client.delete(f"/api/v1/subscriptions/{make_blog().id}", headers=auth_headers(make_user()))

    assert response.status_code == 200


def test_concurrent_subscribe_is_409(client, session, make_user, make_blog, monkeypatch):
    user = make_user()
    blog = make_blog()
    _subscribe(session, user, blog)
    monkeypatch.setattr(SubscriptionService, "is_subscribed", lambda self, user, blog_id: False)

    response = client.post(f"/api/v1/subscriptions/{blog.id}", headers=auth_headers(user))

    assert response.status_code == 409
    assert response.json()["message"] == ALREADY_SUBSCRIBED
    assert len(session.exec(select(BlogSubscription).where(BlogSubscription.user_id == user.id)).all()) == 1
