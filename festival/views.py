"""Role-scoped, read-only views over the program collection."""

from festival.models import Program, ProgramStatus
from festival.session import Role, Session


def _by_start_time(programs: list[Program], newest_first: bool = False) -> list[Program]:
    return sorted(programs, key=lambda p: p.start_time or "", reverse=newest_first)


def green_room_queue(programs: list[Program]) -> list[Program]:
    """Published programs with participants that are not yet with the judges."""
    return _by_start_time([
        p for p in programs
        if p.is_published and p.has_participants() and p.status != ProgramStatus.JUDGING
    ])


def judge_queue(programs: list[Program], session: Session) -> list[Program]:
    """Programs waiting for this judge's scores.

    A judge with a panel only sees that panel's programs; a judge without
    one sees every allocated program.
    """
    return _by_start_time([
        p for p in programs
        if p.is_allocated_to_judge
        and p.status == ProgramStatus.JUDGING
        and (not session.judge_panel or p.judge_panel == session.judge_panel)
    ])


def completed_programs(programs: list[Program]) -> list[Program]:
    """Completed programs, most recent start time first."""
    return _by_start_time(
        [p for p in programs if p.status == ProgramStatus.COMPLETED], newest_first=True
    )


def public_results(programs: list[Program]) -> list[Program]:
    """Completed programs whose results have been published."""
    return [p for p in completed_programs(programs) if p.is_result_published]


def team_programs(programs: list[Program], team_name: str) -> list[Program]:
    """Programs in which ``team_name`` has at least one participant."""
    return [
        p for p in programs
        if any(t.team_name == team_name and t.participants for t in p.teams)
    ]


def visible_programs(programs: list[Program], session: Session) -> list[Program]:
    """The default program list for a session's role."""
    if session.role == Role.GREENROOM:
        return green_room_queue(programs)
    if session.role == Role.JUDGE:
        return judge_queue(programs, session)
    return _by_start_time(programs)
