"""Request-scoped dependencies: caller identity and collaborators."""

from fastapi import Header

from coachplanner.config import get_settings
from coachplanner.scheduling.lifecycle import Actor
from coachplanner.scheduling.notifications import SessionNotifier


def get_actor(
    x_actor_id: int = Header(),
    x_actor_role: str = Header(default="COACH"),
) -> Actor:
    """Caller identity as forwarded by the authenticating gateway."""
    role = x_actor_role.upper()
    return Actor(id=x_actor_id, role=role, is_admin=role in get_settings().admin_roles)


def get_notifier() -> SessionNotifier:
    return SessionNotifier()
