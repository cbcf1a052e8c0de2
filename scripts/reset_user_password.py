"""Reset the password of any user.

Usage: python scripts/reset_user_password.py <email> <new_password>
"""

import sys
import os

# Add parent dir to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.infrastructure.database import SessionLocal, transaction
from app.application.services.auth_service import hash_password
from app.domain.models.user import User
from app.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


def main(argv: list[str]) -> int:
    if len(argv) != 2:
        print(__doc__)
        return 1

    email, new_password = argv
    if len(new_password) < 8:
        print("Password must be at least 8 characters long.")
        return 1

    db = SessionLocal()
    try:
        repo = SQLAlchemyUserRepository(db, User)
        user = repo.get_by_email(email)
        if not user:
            print(f"No user with email {email}")
            return 1
        with transaction(db):
            repo.update(user, {"password_hash": hash_password(new_password)})
        print(f"Password reset for {user.email} ({user.role})")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
