"""Explicit session context: who is acting, and what they may touch."""

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    ADMIN = "admin"
    GREENROOM = "greenroom"
    JUDGE = "judge"
    TEAMLEADER = "teamleader"


class PermissionDenied(Exception):
    """Raised when a session's role does not allow an operation."""
    pass


@dataclass(frozen=True)
class Session:
    """The signed-in user, passed into every service call.

    Attributes:
        role: What the user is allowed to do
        username: Display name for logs
        judge_panel: Panel a judge is scoped to (None sees every panel)
        team_name: Team a team leader manages
    """
    role: Role
    username: str = ""
    judge_panel: str | None = None
    team_name: str | None = None

    def require(self, *roles: Role) -> None:
        """Raise PermissionDenied unless the session has one of ``roles``."""
        if self.role not in roles:
            allowed = ", ".join(r.value for r in roles)
            raise PermissionDenied(
                f"This action needs one of these roles: {allowed} (you are {self.role.value})."
            )

    def require_team(self, team_name: str) -> None:
        """Team leaders may only act on their own team; admins on any."""
        if self.role == Role.ADMIN:
            return
        self.require(Role.TEAMLEADER)
        if not self.team_name or self.team_name != team_name:
            raise PermissionDenied(f"You can only manage team {self.team_name!r}.")

    @classmethod
    def admin(cls, username: str = "admin") -> "Session":
        return cls(role=Role.ADMIN, username=username)
