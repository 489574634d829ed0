"""Shared test helpers."""

from festival.models import Participant, Program, ProgramStatus, Team


def make_participant(chest: str | int, name: str | None = None, **kwargs) -> Participant:
    """Build a Participant; the name defaults to one derived from the chest number."""
    return Participant(name=name or f"Person {chest}", chest_number=str(chest), **kwargs)


def make_team(team_name: str, chests: list, team_id: str | None = None, **kwargs) -> Team:
    """Build a Team from a list of chest numbers (or ready-made participants)."""
    participants = [
        c if isinstance(c, Participant) else make_participant(c)
        for c in chests
    ]
    return Team(
        id=team_id or f"t-{team_name.lower()}",
        team_name=team_name,
        participants=participants,
        **kwargs,
    )


def make_program(
    roster: dict[str, list] | None = None,
    name: str = "Elocution",
    category: str = "A zone stage senior",
    program_id: str = "p1",
    **kwargs,
) -> Program:
    """Build a Program from a compact roster.

    Args:
        roster: {team_name: [chest numbers or participants]}
        name: Program name
        category: Free-text category
        program_id: Document id

    Returns:
        Program with one team per roster entry, in the given order.
    """
    teams = [make_team(team_name, chests) for team_name, chests in (roster or {}).items()]
    return Program(name=name, category=category, id=program_id, teams=teams, **kwargs)


def make_completed(
    team_ranks: dict[str, int],
    category: str = "A zone stage senior",
    program_id: str = "done",
    name: str = "Completed Program",
) -> Program:
    """Build a COMPLETED program whose teams carry only a rank."""
    teams = [
        Team(id=f"t-{team_name.lower()}", team_name=team_name, rank=rank,
             participants=[make_participant(200 + rank)])
        for team_name, rank in team_ranks.items()
    ]
    return Program(
        name=name, category=category, id=program_id,
        status=ProgramStatus.COMPLETED, teams=teams,
    )


def make_scored(
    points: dict[str | int, float],
    category: str = "A zone stage senior",
    program_id: str = "scored",
    name: str = "Scored Program",
    is_group: bool = False,
    status: ProgramStatus = ProgramStatus.COMPLETED,
) -> Program:
    """Build a program whose participants carry points, keyed by chest number.

    Chest numbers 200-299 go to PRUDENTIA and the rest to SAPIENTIA.
    """
    prudentia, sapientia = [], []
    for chest, value in points.items():
        participant = make_participant(chest, points=value)
        (prudentia if int(chest) < 300 else sapientia).append(participant)
    teams = []
    if prudentia:
        teams.append(make_team("PRUDENTIA", prudentia))
    if sapientia:
        teams.append(make_team("SAPIENTIA", sapientia))
    return Program(
        name=name, category=category, id=program_id,
        status=status, teams=teams, is_group=is_group,
    )


def ready_for_judging(program: Program) -> Program:
    """Publish a program and give every participant a revealed code."""
    letters = iter("ABCDEFGHIJKLMNOPQRSTUVWXYZ")
    for participant in program.all_participants():
        participant.code_letter = next(letters)
        participant.is_code_revealed = True
    program.is_published = True
    return program
