"""
Delete the user with the given email and its pending verification.
Usage: python scripts/delete_users_by_email.py <email>
"""
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.database import SessionLocal
from app.models.user import User
from app.models.verification import Verification


def main():
    email = (sys.argv[1] if len(sys.argv) > 1 else "").strip()
    if not email:
        print("Usage: python scripts/delete_users_by_email.py <email>")
        sys.exit(1)

    db = SessionLocal()
    try:
        user = db.query(User).filter(User.email == email).first()
        if not user:
            print(f"No user found with email: {email}")
            sys.exit(0)
        uid = user.id
        role = user.role.value
        db.query(Verification).filter(Verification.user_id == uid).delete()
        db.delete(user)
        db.commit()
        print(f"Deleted user: {email} (role={role}, id={uid})")
    finally:
        db.close()


if __name__ == "__main__":
    main()
