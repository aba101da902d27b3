#!/usr/bin/env python
"""Seed script to create (or promote) the first admin user.

Sign-in is delegated to the identity provider, so there is no password to
set. The script makes sure a user row with the ADMIN role exists and prints
a short-lived bearer token that can be used against the API locally.

Usage:
    python backend/scripts/seed_admin.py

Environment Variables:
    DATABASE_URL: PostgreSQL connection string
    JWT_SECRET: Secret used to sign the printed token
    ADMIN_EMAIL: Email for admin user (default: admin@example.com)
    ADMIN_NAME: Display name for admin user (default: HR Administrator)
"""

import os
import sys
from pathlib import Path

# Add backend/src to Python path
backend_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(backend_src))

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from auth.jwt import create_access_token
from auth.roles import UserRole
from config import get_settings
from models.user import User


def main():
    """Create or promote the admin user."""
    database_url = get_settings().DATABASE_URL

    admin_email = os.getenv("ADMIN_EMAIL", "admin@example.com").strip().lower()
    admin_name = os.getenv("ADMIN_NAME", "HR Administrator")

    engine = create_engine(database_url)
    Session = sessionmaker(bind=engine)
    session = Session()

    try:
        admin_user = session.query(User).filter(User.email == admin_email).first()

        if admin_user is None:
            admin_user = User(email=admin_email, name=admin_name, role=UserRole.ADMIN.value)
            session.add(admin_user)
            action = "created"
        elif admin_user.role != UserRole.ADMIN.value:
            admin_user.role = UserRole.ADMIN.value
            action = "promoted"
        else:
            action = "already admin"

        session.commit()

        print(f"SUCCESS: Admin user {action}")
        for key, value in admin_user.to_dict().items():
            if key in ("id", "email", "name", "role"):
                print(f"  {key.capitalize():<6} {value}")
        print()
        print("Bearer token:")
        print(create_access_token(admin_user.email, name=admin_user.name, subject=str(admin_user.id)))

    except Exception as e:
        session.rollback()
        print(f"ERROR: Failed to seed admin user: {e}")
        sys.exit(1)

    finally:
        session.close()


if __name__ == "__main__":
    main()
