"""
Pytest configuration and fixtures for Lowball Bot tests.
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add src directory to path so imports work
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

import pytest

from lowballbot.moderation.moderation_datatypes import Actor, GuildRole, ModerationMessage

NOW = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


class FakeRoleGateway:
    """In-memory RoleGateway that records every mutation."""

    def __init__(self, roles, members=None):
        self.roles = list(roles)
        self.members = dict(members or {})
        self.calls = []

    def list_roles(self):
        return list(self.roles)

    async def fetch_actor(self, actor_id):
        role_ids = self.members.get(actor_id)
        if role_ids is None:
            return None
        names = tuple(role.name for role in self.roles if role.role_id in role_ids)
        return Actor(actor_id=actor_id, role_names=names, role_ids=frozenset(role_ids))

    async def add_role(self, actor_id, role):
        self.calls.append(("add", actor_id, role.role_id))
        self.members.setdefault(actor_id, set()).add(role.role_id)

    async def remove_role(self, actor_id, role):
        self.calls.append(("remove", actor_id, role.role_id))
        self.members.setdefault(actor_id, set()).discard(role.role_id)


@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture()
def make_message():
    """Build ModerationMessage values with sensible defaults."""
    counter = {"next_id": 1000}

    def factory(author_id: int, *, age: timedelta = timedelta(minutes=5), bot: bool = False, message_id=None):
        counter["next_id"] += 1
        return ModerationMessage(
            message_id=message_id if message_id is not None else counter["next_id"],
            author_id=author_id,
            created_at=NOW - age,
            author_is_bot=bot,
        )

    return factory


@pytest.fixture()
def lowball_role() -> GuildRole:
    return GuildRole(role_id=555, name="Lowball")


@pytest.fixture()
def role_gateway(lowball_role) -> FakeRoleGateway:
    return FakeRoleGateway([GuildRole(role_id=1, name="@everyone"), lowball_role], members={7: set()})
