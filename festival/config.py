"""Festival-wide configuration: canonical teams, rank points and service settings."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True)
class TeamIdentity:
    """A canonical festival team.

    Attributes:
        name: Canonical team name stored on Team records
        chest_min: Lowest chest number belonging to this team (inclusive)
        chest_max: Highest chest number belonging to this team (inclusive)
        aliases: Legacy names that must be read as this team
    """
    name: str
    chest_min: int
    chest_max: int
    aliases: tuple[str, ...] = ()

    def owns_chest(self, chest: int) -> bool:
        return self.chest_min <= chest <= self.chest_max


DEFAULT_TEAMS = (
    TeamIdentity("PRUDENTIA", 200, 299, aliases=("Team Alpha",)),
    TeamIdentity("SAPIENTIA", 300, 399, aliases=("Team Beta",)),
)

DEFAULT_INSIGHTS_URL = "https://generativelanguage.googleapis.com/v1beta/models"


@dataclass(frozen=True)
class FestivalConfig:
    """Settings shared by the engines and the service layer.

    Attributes:
        teams: Canonical teams, in display order
        rank_points: Team points awarded per program rank
        max_normal_programs: Non-general programs one participant may enter
        insights_url: Base URL of the text-generation API
        insights_api_key: API key for the text-generation API (None disables it)
        insights_model: Model name sent to the text-generation API
        insights_timeout: Request timeout in seconds
    """
    teams: tuple[TeamIdentity, ...] = DEFAULT_TEAMS
    rank_points: Mapping[int, int] = field(default_factory=lambda: {1: 10, 2: 7, 3: 5})
    max_normal_programs: int = 4
    insights_url: str = DEFAULT_INSIGHTS_URL
    insights_api_key: str | None = None
    insights_model: str = "gemini-2.0-flash"
    insights_timeout: float = 30.0

    @property
    def team_names(self) -> list[str]:
        return [team.name for team in self.teams]

    def resolve_team_name(self, name: str | None) -> str | None:
        """Map a canonical name or legacy alias to the canonical name.

        Matching is case-insensitive. Returns None for unknown names.
        """
        if not name:
            return None
        wanted = name.strip().lower()
        for team in self.teams:
            if team.name.lower() == wanted:
                return team.name
            if any(alias.lower() == wanted for alias in team.aliases):
                return team.name
        return None

    def home_team(self, chest_number: str | int | None) -> str | None:
        """Return the canonical team owning a chest number, or None if out of range."""
        try:
            chest = int(str(chest_number).strip())
        except ValueError:
            return None
        for team in self.teams:
            if team.owns_chest(chest):
                return team.name
        return None

    def team_order(self, name: str) -> int:
        """Position of a team in the configured order; unknown teams sort last."""
        resolved = self.resolve_team_name(name)
        names = self.team_names
        return names.index(resolved) if resolved in names else len(names)


def load_config(environ: Mapping[str, str] | None = None) -> FestivalConfig:
    """Build a FestivalConfig from environment variables.

    Recognised variables: FESTIVAL_INSIGHTS_API_KEY, FESTIVAL_INSIGHTS_MODEL,
    FESTIVAL_INSIGHTS_URL, FESTIVAL_INSIGHTS_TIMEOUT.
    """
    env = os.environ if environ is None else environ
    defaults = FestivalConfig()
    return FestivalConfig(
        insights_api_key=env.get("FESTIVAL_INSIGHTS_API_KEY") or None,
        insights_model=env.get("FESTIVAL_INSIGHTS_MODEL", defaults.insights_model),
        insights_url=env.get("FESTIVAL_INSIGHTS_URL", defaults.insights_url),
        insights_timeout=float(env.get("FESTIVAL_INSIGHTS_TIMEOUT", defaults.insights_timeout)),
    )


DEFAULT_CONFIG = FestivalConfig()
