from blogsphere.core.security import verify_password
from seed_data import seed_admin


def test_seed_creates_admin(session):
    user = seed_admin(session, "admin@example.com", "Admin", "admin-password")

    assert user.is_admin
    assert verify_password("admin-password", user.password_hash)


def test_seed_promotes_existing_user(session, make_user):
    existing = make_user(email="boss@example.com")
    hash_before = existing.password_hash

    user = seed_admin(session, "Boss@example.com", "Ignored", "ignored-password")

    assert user.id == existing.id
    assert user.is_admin
    assert user.password_hash == hash_before


def test_seed_is_idempotent(session, make_user):
    make_user(email="admin@example.com", is_admin=True)

    seed_admin(session, "admin@example.com", "Admin", "admin-password")

    assert seed_admin(session, "admin@example.com", "Admin", "admin-password").is_admin
