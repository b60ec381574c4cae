"""Exceptions raised by the moderation layer."""


class ModerationError(Exception):
    """Base class for moderation failures."""


class PermissionDenied(ModerationError):
    """The invoking member lacks the capability a command requires."""

    def __init__(self, permission: str):
        super().__init__(f"Missing permission: {permission}")
        self.permission = permission


class RoleNotFound(ModerationError):
    """A configured role name does not resolve in the guild."""

    def __init__(self, role_name: str):
        super().__init__(f"Role {role_name!r} not found")
        self.role_name = role_name


class RateLimited(ModerationError):
    """The platform refused a single call because of its rate limit."""


class ExternalCallFailure(ModerationError):
    """An unexpected failure from the Discord client."""


class NoEligibleMessages(ModerationError):
    """A purge found nothing to delete among the fetched messages."""

    def __init__(self, inspected_count: int):
        super().__init__(f"No eligible messages in the last {inspected_count} messages")
        self.inspected_count = inspected_count
