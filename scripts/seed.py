# scripts/seed.py

import argparse
import os
import sys
from typing import Optional

from dotenv import load_dotenv
from sqlmodel import Session, select

# Ensure root path for relative imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.database import Database, transaction  # noqa: E402
from core.security import hash_password  # noqa: E402
from crud import clients as clients_crud  # noqa: E402
from crud import projects as projects_crud  # noqa: E402
from models.models import Client, Project, Role, User  # noqa: E402


def seed_admin(session: Session, email: str, password: str, first_name: str = "Admin", last_name: str = "User") -> User:
    """Create the admin account if it does not exist yet. Never overwrites an existing password."""
    email = email.strip().lower()
    admin = session.exec(select(User).where(User.email == email)).first()
    if admin:
        print(f"ℹ️  {email} already exists, leaving it untouched")
        return admin

    admin = User(
        email=email,
        password_hash=hash_password(password),
        first_name=first_name,
        last_name=last_name,
        role=Role.ADMIN.value,
        is_active=True,
    )
    with transaction(session):
        session.add(admin)
    session.refresh(admin)
    print(f"✅ Added admin user {email}")
    return admin


def seed_demo_data(session: Session, admin: User) -> Optional[Project]:
    """One active client with a project attached, owned by ``admin``."""
    client = session.exec(
        select(Client).where(Client.user_id == admin.id, Client.name == "Acme Corp")
    ).first()
    if not client:
        with transaction(session):
            client = clients_crud.create_client(
                session,
                admin,
                {"name": "Acme Corp", "email": "hello@acmecorp.com", "company": "Acme Corporation"},
            )
        print("✅ Created demo client Acme Corp")

    project = session.exec(
        select(Project).where(Project.user_id == admin.id, Project.name == "Website Revamp")
    ).first()
    if not project:
        with transaction(session):
            project = projects_crud.create_project(
                session,
                admin,
                {"name": "Website Revamp", "description": "Redesign of the marketing site", "status": "active"},
                [client.id],
            )
        print("✅ Created demo project Website Revamp")
    return project


def main(argv=None) -> None:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Seed the Freelance PM database.")
    parser.add_argument("--email", default=os.getenv("ADMIN_EMAIL", "admin@freelancepm.io"))
    parser.add_argument("--password", default=os.getenv("ADMIN_PASSWORD"))
    parser.add_argument("--first-name", default="Admin")
    parser.add_argument("--last-name", default="User")
    parser.add_argument("--demo", action="store_true", help="Also create a demo client and project")
    args = parser.parse_args(argv)

    if not args.password:
        parser.error("an admin password is required (--password or ADMIN_PASSWORD)")

    from core.config import settings

    db = Database.from_settings(settings)
    db.create_all()
    print("🌱 Seeding database...")
    with db.session() as session:
        admin = seed_admin(session, args.email, args.password, args.first_name, args.last_name)
        if args.demo:
            seed_demo_data(session, admin)
    db.dispose()
    print("🌱 Seeding complete.")


if __name__ == "__main__":
    main()
