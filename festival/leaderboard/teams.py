"""Team totals: rank points accumulated by the canonical festival teams."""

import logging
from dataclasses import dataclass, field
from typing import Any

from festival.config import DEFAULT_CONFIG, FestivalConfig
from festival.models import Program, ProgramStatus

logger = logging.getLogger(__name__)


@dataclass
class TeamScore:
    name: str
    score: int

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "score": self.score}


@dataclass
class TeamStandings:
    """Team totals, best first.

    Attributes:
        scores: Canonical team name -> total rank points
        ranking: Teams ordered by score (ties follow the configured order)
        skipped: Team names that were not recognised
    """
    scores: dict[str, int]
    ranking: list[TeamScore]
    skipped: list[str] = field(default_factory=list)

    @property
    def leading(self) -> TeamScore | None:
        return self.ranking[0] if self.ranking else None

    @property
    def trailing(self) -> TeamScore | None:
        return self.ranking[-1] if len(self.ranking) > 1 else None

    @property
    def margin(self) -> int:
        if not self.ranking:
            return 0
        trailing = self.trailing.score if self.trailing else 0
        return self.ranking[0].score - trailing

    def to_dict(self) -> dict[str, Any]:
        return {
            "scores": self.scores,
            "leading_team": self.leading.to_dict() if self.leading else None,
            "trailing_team": self.trailing.to_dict() if self.trailing else None,
            "margin": self.margin,
        }


def calculate_team_totals(
    programs: list[Program],
    config: FestivalConfig = DEFAULT_CONFIG,
    zone: str | None = None,
) -> TeamStandings:
    """Award rank points for every podium finish in completed programs.

    With the default config 1st/2nd/3rd earn 10/7/5. Legacy team aliases are
    mapped to canonical names; unknown team names are skipped with a warning.

    Args:
        programs: The full program collection
        config: Canonical teams and rank points
        zone: Only count programs of this zone ("A", "B", "C")

    Returns:
        TeamStandings with a total for every canonical team.
    """
    scores = {name: 0 for name in config.team_names}
    skipped: list[str] = []

    for program in programs:
        if program.status != ProgramStatus.COMPLETED:
            continue
        if zone is not None and program.tags.zone != zone:
            continue
        for team in program.teams:
            points = config.rank_points.get(team.rank) if team.rank else None
            if not points:
                continue
            name = config.resolve_team_name(team.team_name)
            if name is None:
                logger.warning(
                    "Skipping unknown team %r in program %r", team.team_name, program.name
                )
                skipped.append(team.team_name)
                continue
            scores[name] += points

    ranking = sorted(
        (TeamScore(name, score) for name, score in scores.items()),
        key=lambda t: (-t.score, config.team_order(t.name)),
    )
    return TeamStandings(scores=scores, ranking=ranking, skipped=skipped)
