"""Orchestrator: team totals and every registered champion award in one pass."""

import logging
from dataclasses import dataclass, field
from typing import Any

from festival.categories import ZONES
from festival.config import DEFAULT_CONFIG, FestivalConfig
from festival.leaderboard import get_all_awards
from festival.leaderboard import champions  # noqa: F401
from festival.leaderboard.base import ChampionResult
from festival.leaderboard.teams import TeamStandings, calculate_team_totals
from festival.models import Program

logger = logging.getLogger(__name__)


@dataclass
class LeaderboardResult:
    """Complete leaderboard derived from the program collection."""
    teams: TeamStandings
    zones: dict[str, TeamStandings]
    champions: list[ChampionResult] = field(default_factory=list)

    def get_champion(self, key: str) -> ChampionResult | None:
        for result in self.champions:
            if result.key == key:
                return result
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "teams": self.teams.to_dict(),
            "zones": {zone: standings.to_dict() for zone, standings in self.zones.items()},
            "champions": [result.to_dict() for result in self.champions],
        }


def calculate_leaderboard(
    programs: list[Program], config: FestivalConfig = DEFAULT_CONFIG
) -> LeaderboardResult:
    """Compute team totals, per-zone totals and all champion awards.

    Pure and safe to recompute on every change to the collection. An award
    that fails is reported in its result details instead of failing the
    whole leaderboard.
    """
    teams = calculate_team_totals(programs, config)
    zones = {zone: calculate_team_totals(programs, config, zone=zone) for zone in ZONES}

    results = []
    for award in get_all_awards():
        try:
            results.append(award.calculate(programs))
        except Exception as e:
            logger.exception("Award %s failed", award.key)
            results.append(ChampionResult(
                key=award.key,
                title=award.title,
                champion=None,
                details={"error": str(e)},
            ))

    return LeaderboardResult(teams=teams, zones=zones, champions=results)
