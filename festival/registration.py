"""Team-leader registration: validating and applying participant sign-ups.

A registration enters one person (name and chest number) into a set of
programs under one team. Everything here is pure; the service layer writes
the resulting team lists back to the store.
"""

import copy
import uuid
from dataclasses import dataclass, field

from festival.config import DEFAULT_CONFIG, FestivalConfig
from festival.models import Participant, Program, Team


class RegistrationError(ValueError):
    """Raised when a registration breaks one of the sign-up rules.

    Attributes:
        problems: Every rule violation found, one message each
    """

    def __init__(self, message: str, problems: list[str] | None = None):
        super().__init__(message)
        self.problems = problems or [message]


@dataclass
class Registration:
    name: str
    chest_number: str
    program_ids: list[str] = field(default_factory=list)

    def participant(self) -> Participant:
        return Participant(name=self.name.strip(), chest_number=self.chest_number.strip())


def remove_participant(program: Program, chest_number: str, team_name: str | None = None) -> list[Team]:
    """Return the program's teams without ``chest_number``.

    Only teams named ``team_name`` are touched when it is given. Teams left
    with no participants are dropped.
    """
    teams = []
    for team in copy.deepcopy(program.teams):
        if team_name is None or team.team_name == team_name:
            team.participants = [p for p in team.participants if p.chest_number != chest_number]
            if not team.participants:
                continue
        teams.append(team)
    return teams


def is_registered(programs: list[Program], team_name: str, chest_number: str) -> bool:
    return any(
        p.chest_number == chest_number
        for program in programs
        for team in program.teams
        if team.team_name == team_name
        for p in team.participants
    )


def group_team_limit(program: Program, team_name: str) -> int | None:
    """Per-team participant limit for a group program, or None if unlimited.

    The capacity is shared equally between the teams entered, counting
    ``team_name`` even if it has not registered anyone yet.
    """
    if not program.is_group or not program.participants_count:
        return None
    entered = {team.team_name for team in program.teams}
    entered.add(team_name)
    return program.participants_count // len(entered)


def validate_registration(
    programs: list[Program],
    team_name: str,
    registration: Registration,
    editing: str | None = None,
    config: FestivalConfig = DEFAULT_CONFIG,
) -> None:
    """Check a registration against the sign-up rules.

    Args:
        programs: The full program collection
        team_name: The registering team
        registration: Who is being registered, and for what
        editing: Chest number of the participant being edited, if any
        config: Supplies the limit on non-general programs

    Raises:
        RegistrationError: listing every broken rule
    """
    if not registration.name.strip() or not registration.chest_number.strip():
        raise RegistrationError("Name and chest number are required.")
    if not registration.program_ids:
        raise RegistrationError("Select at least one program.")
    chest = registration.chest_number.strip()
    if editing is None and is_registered(programs, team_name, chest):
        raise RegistrationError(f"A participant with chest number {chest} already exists.")

    by_id = {program.id: program for program in programs}
    missing = [pid for pid in registration.program_ids if pid not in by_id]
    if missing:
        raise RegistrationError(f"Unknown programs: {', '.join(missing)}")
    selected = [by_id[pid] for pid in dict.fromkeys(registration.program_ids)]

    problems = []
    normal = [p for p in selected if not p.tags.is_general]
    if len(normal) > config.max_normal_programs:
        problems.append(
            f"Maximum {config.max_normal_programs} normal programs allowed "
            f"({len(normal)} selected). General programs are unlimited."
        )

    for program in selected:
        limit = group_team_limit(program, team_name)
        if limit is None:
            continue
        current = sum(
            1
            for team in program.teams if team.team_name == team_name
            for p in team.participants if p.chest_number != editing
        )
        if current >= limit:
            problems.append(
                f'"{program.name}": your team can only register {limit} participant(s).'
            )

    if problems:
        raise RegistrationError(problems[0] if len(problems) == 1 else "; ".join(problems), problems)


def apply_registration(
    programs: list[Program],
    team_name: str,
    registration: Registration,
    editing: str | None = None,
) -> dict[str, list[Team]]:
    """Compute the new team lists for every program the registration touches.

    When editing, the participant is first removed from every program of
    the team, then added to the selected ones. New team records get a fresh
    id.

    Returns:
        Mapping of program id to its new teams, only for programs that change.
    """
    selected = set(registration.program_ids)
    changes: dict[str, list[Team]] = {}

    for program in programs:
        teams = program.teams
        if editing is not None:
            teams = remove_participant(program, editing, team_name)
        if program.id in selected:
            teams = copy.deepcopy(teams)
            team = next((t for t in teams if t.team_name == team_name), None)
            if team is None:
                team = Team(id=uuid.uuid4().hex, team_name=team_name)
                teams.append(team)
            team.participants.append(registration.participant())
        if teams != program.teams:
            changes[program.id] = teams

    return changes
