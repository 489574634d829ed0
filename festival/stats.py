"""Summary statistics for the dashboard."""

from dataclasses import dataclass, field

from festival.models import Program, ProgramStatus


@dataclass
class FestivalStats:
    total_programs: int
    completed_count: int
    pending_count: int
    cancelled_count: int
    judging_count: int
    total_participants: int
    average_score: float


@dataclass
class Achievement:
    program_name: str
    rank: int


@dataclass
class ParticipantSummary:
    """Everything one participant is registered for, and how they placed."""
    name: str
    chest_number: str
    team_name: str
    program_names: list[str] = field(default_factory=list)
    achievements: list[Achievement] = field(default_factory=list)

    @property
    def program_count(self) -> int:
        return len(self.program_names)

    @property
    def total_wins(self) -> int:
        return sum(1 for a in self.achievements if a.rank == 1)


def festival_stats(programs: list[Program]) -> FestivalStats:
    """Counts by status, distinct participants and the average team score.

    The average is taken over every scored team in completed programs.
    """
    by_status = {status: 0 for status in ProgramStatus}
    chests: set[str] = set()
    scores: list[float] = []

    for program in programs:
        by_status[program.status] += 1
        chests.update(p.chest_number for p in program.all_participants())
        if program.status == ProgramStatus.COMPLETED:
            scores.extend(t.score for t in program.teams if t.score is not None)

    return FestivalStats(
        total_programs=len(programs),
        completed_count=by_status[ProgramStatus.COMPLETED],
        pending_count=by_status[ProgramStatus.PENDING],
        cancelled_count=by_status[ProgramStatus.CANCELLED],
        judging_count=by_status[ProgramStatus.JUDGING],
        total_participants=len(chests),
        average_score=round(sum(scores) / len(scores), 1) if scores else 0.0,
    )


def participant_summaries(
    programs: list[Program], team_name: str | None = None
) -> list[ParticipantSummary]:
    """One summary per chest number, optionally limited to one team.

    Podium finishes (participant rank 1-3 in completed programs) are listed
    as achievements.
    """
    summaries: dict[str, ParticipantSummary] = {}
    for program in programs:
        for team in program.teams:
            if team_name is not None and team.team_name != team_name:
                continue
            for participant in team.participants:
                summary = summaries.setdefault(
                    participant.chest_number,
                    ParticipantSummary(
                        name=participant.name,
                        chest_number=participant.chest_number,
                        team_name=team.team_name,
                    ),
                )
                summary.program_names.append(program.name)
                if (
                    program.status == ProgramStatus.COMPLETED
                    and participant.rank is not None
                    and participant.rank <= 3
                ):
                    summary.achievements.append(Achievement(program.name, participant.rank))
    return sorted(summaries.values(), key=lambda s: s.chest_number)
