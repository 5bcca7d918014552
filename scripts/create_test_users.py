"""
Create one verified test user per role (Client, Owner, Delivery).
Use when verification emails are not configured so you can log in and test the API.

Run from project root:
  python scripts/create_test_users.py

Credentials are printed at the end.
"""
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.database import Base, SessionLocal, engine
from app.models import User, UserRole, Verification  # noqa: F401
from app.services.auth import get_password_hash

TEST_PASSWORD = "Password123!"
TEST_USERS = [
    ("client@eats.demo", UserRole.Client),
    ("owner@eats.demo", UserRole.Owner),
    ("delivery@eats.demo", UserRole.Delivery),
]


def main():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        for email, role in TEST_USERS:
            user = db.query(User).filter(User.email == email).first()
            if user:
                print(f"{role.value} already exists: {email}")
                continue
            db.add(
                User(
                    email=email,
                    hashed_password=get_password_hash(TEST_PASSWORD),
                    role=role,
                    verified=True,
                )
            )
            print(f"Created {role.value}: {email}")
        db.commit()
    finally:
        db.close()

    print("\n--- Test credentials ---")
    for email, role in TEST_USERS:
        print(f"{role.value:<9} {email} / {TEST_PASSWORD}")


if __name__ == "__main__":
    main()
