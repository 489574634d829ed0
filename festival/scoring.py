"""Scoring and ranking engine: turns judge submissions into final program results."""

import copy
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Self

from festival.config import DEFAULT_CONFIG, FestivalConfig
from festival.models import Participant, Program, ProgramStatus, Team, judged_units
from festival.points import calculate_points, round_half_up


@dataclass
class ScoreEntry:
    """A judge's raw score (0-100) and grade for one participant or sub-team."""
    score: float = 0.0
    grade: str = ""

    @classmethod
    def parse(cls, score: str | float | None, grade: str | None) -> Self:
        """Build an entry from form input; blank or invalid scores count as 0."""
        try:
            value = float(score) if score not in (None, "") else 0.0
        except (TypeError, ValueError):
            value = 0.0
        if math.isnan(value):
            value = 0.0
        return cls(score=value, grade=(grade or "").strip())


@dataclass
class ScoringResult:
    """Outcome of scoring a program.

    Attributes:
        teams: Updated Team records with participant and team results
        ranking: All participants from best to worst
        details: Per-team aggregation info for transparency
    """
    teams: list[Team]
    ranking: list[Participant]
    details: dict[str, Any] = field(default_factory=dict)

    def to_update(self) -> dict[str, Any]:
        """The single partial update that completes the program."""
        return {
            "status": ProgramStatus.COMPLETED,
            "is_published": False,
            "teams": self.teams,
        }


def _chest_key(participant: Participant) -> float:
    value = participant.chest_value
    return float(value) if value is not None else math.inf


def score_program(
    program: Program,
    scores: Mapping[str, ScoreEntry],
    config: FestivalConfig = DEFAULT_CONFIG,
) -> ScoringResult:
    """Compute points and ranks for every participant and team in a program.

    1. Each judged unit (a participant, or a whole sub-team chunk in group
       programs) gets points from its score and grade. Chunk members share one
       entry: the first member that has one in ``scores``.
    2. All participants are ranked together by points, highest first. Ties
       break by chest number ascending, then by roster order.
    3. Each team is represented by its best performer's score and grade.
       Team points are the best performer's points for group programs and
       the sum of the members' points for individual programs.
    4. Teams are ranked separately by team points. Ties break by the
       configured team order.

    Missing entries count as score 0 with no grade; submissions are never
    rejected here.

    Args:
        program: The program being judged (not modified)
        scores: Entries keyed by chest number
        config: Team order used for team-rank ties

    Returns:
        ScoringResult with the updated teams.
    """
    teams = copy.deepcopy(program.teams)

    for _, members in judged_units(teams, program.is_group, program.member_limit):
        entry = next((scores[p.chest_number] for p in members if p.chest_number in scores), None)
        entry = entry or ScoreEntry()
        points = calculate_points(entry.score, entry.grade, program.is_group)
        for participant in members:
            participant.score = entry.score
            participant.grade = entry.grade
            participant.points = points

    ordered = [p for team in teams for p in team.participants]
    ranking = [
        p for _, p in sorted(
            enumerate(ordered),
            key=lambda item: (-item[1].points, _chest_key(item[1]), item[0]),
        )
    ]
    for position, participant in enumerate(ranking, start=1):
        participant.rank = position

    team_details = {}
    for team in teams:
        if not team.participants:
            team.score, team.grade, team.points = 0.0, "", 0.0
            continue
        best = max(team.participants, key=lambda p: p.points)
        team.score = best.score
        team.grade = best.grade
        if program.is_group:
            team.points = best.points
        else:
            team.points = round_half_up(sum(p.points for p in team.participants))
        team_details[team.team_name] = {
            "best_performer": best.chest_number,
            "points": team.points,
        }

    team_order = sorted(
        enumerate(teams),
        key=lambda item: (-item[1].points, config.team_order(item[1].team_name), item[0]),
    )
    for position, (_, team) in enumerate(team_order, start=1):
        team.rank = position

    return ScoringResult(
        teams=teams,
        ranking=ranking,
        details={"teams": team_details},
    )

