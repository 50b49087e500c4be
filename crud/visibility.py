# crud/visibility.py
"""
Row-level visibility for clients and projects.

Admins see the rows they created. Everyone else sees only what has been
assigned to them through ``user_clients``; projects are reached transitively
through ``project_clients``. The same predicate backs list, get, stats,
update and delete so a row is either visible everywhere or nowhere.
"""
from sqlmodel import select

from models.models import Client, Project, ProjectClientLink, User, UserClientLink


def assigned_client_ids(actor: User):
    return select(UserClientLink.client_id).where(UserClientLink.user_id == actor.id)


def client_visibility(actor: User):
    if actor.is_admin:
        return Client.user_id == actor.id
    return Client.id.in_(assigned_client_ids(actor))


def project_visibility(actor: User):
    if actor.is_admin:
        return Project.user_id == actor.id
    linked_projects = (
        select(ProjectClientLink.project_id)
        .join(UserClientLink, UserClientLink.client_id == ProjectClientLink.client_id)
        .where(UserClientLink.user_id == actor.id)
    )
    return Project.id.in_(linked_projects)
