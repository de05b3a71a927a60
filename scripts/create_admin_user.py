import argparse
import getpass
import os
import sys

# Add project root to Python path to allow importing app modules
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from app.db.base import Base
from app.db.session import SessionLocal, engine
from app.crud import crud_user
from app.models.user import AdminUserCreate


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create an admin account, or reset its password if it exists.")
    parser.add_argument("email", help="Login email of the admin.")
    parser.add_argument("password", nargs="?", help="Password. Prompted for when omitted.")
    parser.add_argument("--name", default=None, help="Display name.")
    args = parser.parse_args(argv)

    password = args.password or getpass.getpass("Password: ")
    if not password:
        print("Error: password must not be empty.")
        return 1

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        existing = crud_user.get_user_by_email(db, email=args.email)
        if existing:
            crud_user.set_password(db, existing, password)
            print(f"Password updated for {args.email}.")
        else:
            user = crud_user.create_admin_user(db, AdminUserCreate(email=args.email, full_name=args.name, password=password))
            print(f"Created admin {user.email} (id={user.id}).")
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
