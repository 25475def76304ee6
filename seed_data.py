import argparse

from sqlmodel import Session, select, func

from blogsphere.core.security import get_password_hash
from blogsphere.db.session import engine, create_db_and_tables
from blogsphere.models.user import User


def seed_admin(session: Session, email: str, name: str, password: str) -> User:
    """Create the admin account, or promote an existing user with that email."""
    user = session.exec(select(User).where(func.lower(User.email) == email.lower())).first()
    if user:
        if user.is_admin:
            print(f"User {user.email} is already an admin. Skipping seed.")
            return user
        print(f"Promoting {user.email} to admin...")
        user.is_admin = True
    else:
        print(f"Creating admin {email}...")
        user = User(name=name, email=email, password_hash=get_password_hash(password), is_admin=True)

    session.add(user)
    session.commit()
    session.refresh(user)
    print(f"Admin ready: {user.email} (id {user.id})")
    return user


def main():
    parser = argparse.ArgumentParser(description="Create the database and an admin account.")
    parser.add_argument("email")
    parser.add_argument("password")
    parser.add_argument("--name", default="Administrator")
    args = parser.parse_args()

    print("Creating database and tables...")
    create_db_and_tables()
    with Session(engine) as session:
        seed_admin(session, args.email, args.name, args.password)


if __name__ == "__main__":
    main()
