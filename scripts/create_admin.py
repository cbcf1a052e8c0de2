"""Create an admin account from the command line.

Usage: python scripts/create_admin.py <email> <password> [first_name] [last_name]
"""

import sys
import os

# Add parent dir to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.infrastructure.database import Base, SessionLocal, engine, transaction
from app.application.services.admin_service import create_admin
from app.core.exceptions import AppError
from app.domain.models.user import User
from app.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


def main(argv: list[str]) -> int:
    if len(argv) < 2:
        print(__doc__)
        return 1

    email, password = argv[0], argv[1]
    first_name = argv[2] if len(argv) > 2 else "Admin"
    last_name = argv[3] if len(argv) > 3 else "User"
    if len(password) < 8:
        print("Password must be at least 8 characters long.")
        return 1

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        repo = SQLAlchemyUserRepository(db, User)
        with transaction(db):
            user = create_admin(repo, email, password, first_name=first_name, last_name=last_name)
        print(f"Admin created: {user.email} (id={user.id})")
        return 0
    except AppError as e:
        print(f"Could not create admin: {e.message}")
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
