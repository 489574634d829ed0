"""Team-data reconciliation: rebuild team rosters from chest-number ranges.

A participant's home team is decided by their chest number alone. When a
program's rosters drift from that rule, ``fix_team_assignments`` rebuilds the
teams and ``generate_fix_report`` previews which participants would move or
be dropped.
"""

import copy
import logging
import uuid
from dataclasses import dataclass, field, replace
from typing import Any

from festival.config import DEFAULT_CONFIG, FestivalConfig
from festival.models import Participant, Program, Team

logger = logging.getLogger(__name__)

RESULT_FIELDS = ("score", "rank", "grade", "points")


@dataclass
class ParticipantMove:
    name: str
    chest_number: str
    program_name: str
    from_team: str
    to_team: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "chest_number": self.chest_number,
            "program_name": self.program_name,
            "from": self.from_team,
            "to": self.to_team,
        }


@dataclass
class DroppedParticipant:
    """A participant whose chest number no team owns; reconciliation removes them."""
    name: str
    chest_number: str
    program_name: str
    team_name: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "chest_number": self.chest_number,
            "program_name": self.program_name,
            "team": self.team_name,
        }


@dataclass
class FixReport:
    """Preview of a reconciliation run.

    Attributes:
        total_programs: Programs inspected
        affected_programs: Programs with at least one misplaced or dropped participant
        moves: Every participant that would change team
        dropped: Every participant that would be removed
    """
    total_programs: int
    affected_programs: int
    moves: list[ParticipantMove] = field(default_factory=list)
    dropped: list[DroppedParticipant] = field(default_factory=list)


def _new_team_id(team_name: str) -> str:
    return f"t-{team_name.lower()}-{uuid.uuid4().hex[:12]}"


def fix_program(program: Program, config: FestivalConfig = DEFAULT_CONFIG) -> Program:
    """Return a copy of ``program`` whose teams follow the chest-number rule.

    1. Every participant is pulled out of every team, in roster order.
    2. Participants are bucketed by the canonical team owning their chest
       number; chest numbers outside every range are dropped with a warning.
    3. One team per non-empty bucket is built. Team-level results, and the
       team id, are carried over from an original team with the same
       canonical name; otherwise a fresh id is generated.
    4. Teams keep the order in which their canonical names first appeared,
       followed by the configured order for new ones.
    """
    buckets: dict[str, list[Participant]] = {name: [] for name in config.team_names}
    for team in program.teams:
        for participant in team.participants:
            home = config.home_team(participant.chest_number)
            if home is None:
                logger.warning(
                    "Dropping %s (%s) from %r: chest number outside every team range",
                    participant.name, participant.chest_number, program.name,
                )
                continue
            buckets[home].append(copy.deepcopy(participant))

    # A team filed under an alias counts as its canonical team; an exact name wins.
    originals: dict[str, Team] = {}
    for team in program.teams:
        name = config.resolve_team_name(team.team_name) or team.team_name
        current = originals.get(name)
        if current is None or (current.team_name != name and team.team_name == name):
            originals[name] = team

    order = [name for name in originals if name in buckets]
    order += [name for name in config.team_names if name not in order]

    teams = []
    for name in order:
        members = buckets[name]
        if not members:
            continue
        original = originals.get(name)
        rebuilt = Team(
            id=original.id if original else _new_team_id(name),
            team_name=name,
            participants=members,
        )
        if original:
            for attr in RESULT_FIELDS:
                setattr(rebuilt, attr, getattr(original, attr))
        teams.append(rebuilt)

    return replace(program, teams=teams)


def fix_team_assignments(
    programs: list[Program], config: FestivalConfig = DEFAULT_CONFIG
) -> list[Program]:
    """Apply ``fix_program`` to every program. Running it twice changes nothing more."""
    return [fix_program(program, config) for program in programs]


def changed_programs(
    programs: list[Program], config: FestivalConfig = DEFAULT_CONFIG
) -> list[Program]:
    """Fixed copies of only those programs whose teams actually change."""
    return [
        fixed for original, fixed in zip(programs, fix_team_assignments(programs, config))
        if fixed.teams != original.teams
    ]


def generate_fix_report(
    programs: list[Program], config: FestivalConfig = DEFAULT_CONFIG
) -> FixReport:
    """List the participants that reconciliation would move or drop, without changing anything."""
    moves: list[ParticipantMove] = []
    dropped: list[DroppedParticipant] = []
    affected = 0

    for program in programs:
        program_affected = False
        for team in program.teams:
            for participant in team.participants:
                correct = config.home_team(participant.chest_number)
                if correct is None:
                    dropped.append(DroppedParticipant(
                        name=participant.name,
                        chest_number=participant.chest_number,
                        program_name=program.name,
                        team_name=team.team_name,
                    ))
                    program_affected = True
                elif correct != team.team_name:
                    moves.append(ParticipantMove(
                        name=participant.name,
                        chest_number=participant.chest_number,
                        program_name=program.name,
                        from_team=team.team_name,
                        to_team=correct,
                    ))
                    program_affected = True
        if program_affected:
            affected += 1

    return FixReport(
        total_programs=len(programs), affected_programs=affected, moves=moves, dropped=dropped,
    )
