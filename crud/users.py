# crud/users.py
import uuid
from typing import List, Optional, Sequence

from sqlalchemy import desc
from sqlmodel import Session, select

from crud.clients import delete_client
from crud.projects import dedupe_ids
from models.models import Client, User, UserClientLink


def get_user_by_email(session: Session, email: str) -> Optional[User]:
    return session.exec(select(User).where(User.email == email.strip().lower())).first()


def get_user_by_invite_token(session: Session, token: str) -> Optional[User]:
    return session.exec(select(User).where(User.invite_token == token)).first()


def list_users(session: Session) -> List[User]:
    return list(session.exec(select(User).order_by(desc(User.created_at), User.email)).all())


# ============================================================
# ✅ Client assignments (user_clients)
# ============================================================
def get_user_client_ids(session: Session, user_id: uuid.UUID) -> List[uuid.UUID]:
    query = (
        select(UserClientLink.client_id)
        .where(UserClientLink.user_id == user_id)
        .order_by(UserClientLink.created_at, UserClientLink.client_id)
    )
    return list(session.exec(query).all())


def set_user_client_ids(session: Session, user_id: uuid.UUID, client_ids: Sequence[uuid.UUID]) -> List[uuid.UUID]:
    """Replace the user's client assignments. Caller commits."""
    for link in session.exec(select(UserClientLink).where(UserClientLink.user_id == user_id)).all():
        session.delete(link)
    session.flush()

    ordered = dedupe_ids(client_ids)
    for client_id in ordered:
        session.add(UserClientLink(user_id=user_id, client_id=client_id))
    session.flush()
    return ordered


def delete_user(session: Session, user: User) -> None:
    """
    Permanently remove ``user``. Owned clients go through the client delete so
    projects they served get their primary client resynced; everything else
    is removed by the foreign-key cascades.
    """
    for client in session.exec(select(Client).where(Client.user_id == user.id)).all():
        delete_client(session, client)
    for link in session.exec(select(UserClientLink).where(UserClientLink.user_id == user.id)).all():
        session.delete(link)
    session.flush()
    session.delete(user)
    session.flush()
