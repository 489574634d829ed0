"""Abstract base class and shared accumulation for champion awards."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from festival.categories import Category
from festival.models import Program, ProgramStatus


@dataclass
class Candidate:
    """A participant's accumulated points under one award's filter.

    Attributes:
        name: Participant name (as first seen)
        chest_number: Festival-wide chest number, the accumulation key
        team_name: Team the participant was first seen under
        total_points: Sum of points over matching programs
        programs: (program name, category, points) for every counted program
    """
    name: str
    chest_number: str
    team_name: str
    total_points: float = 0.0
    programs: list[tuple[str, str, float]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "chest_number": self.chest_number,
            "team_name": self.team_name,
            "points": self.total_points,
            "program_count": len(self.programs),
        }


@dataclass
class ChampionResult:
    """Result of one award.

    Attributes:
        key: Stable identifier of the award
        title: Display title
        champion: Winning candidate, or None when nobody scored
        details: Award-specific information (e.g. runner-up list, errors)
    """
    key: str
    title: str
    champion: Candidate | None
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "title": self.title,
            "champion": self.champion.to_dict() if self.champion else None,
            "details": self.details,
        }


def accumulate_points(
    programs: list[Program], include: Callable[[Category], bool]
) -> list[Candidate]:
    """Sum participant points per chest number over matching programs.

    Only completed individual programs whose category satisfies ``include``
    count, and only participants with positive points.
    """
    candidates: dict[str, Candidate] = {}
    for program in programs:
        if program.status != ProgramStatus.COMPLETED or program.is_group:
            continue
        if not include(program.tags):
            continue
        for team in program.teams:
            for participant in team.participants:
                points = participant.points or 0
                if points <= 0 or not participant.chest_number:
                    continue
                entry = candidates.setdefault(
                    participant.chest_number,
                    Candidate(
                        name=participant.name,
                        chest_number=participant.chest_number,
                        team_name=team.team_name,
                    ),
                )
                entry.total_points += points
                entry.programs.append((program.name, program.category, points))

    for entry in candidates.values():
        entry.total_points = round(entry.total_points, 1)
    return list(candidates.values())


def _chest_sort_key(candidate: Candidate) -> tuple[int, int | str]:
    try:
        return (0, int(candidate.chest_number))
    except ValueError:
        return (1, candidate.chest_number)


def pick_top(candidates: list[Candidate]) -> Candidate | None:
    """Pick the candidate with the highest total.

    Candidates are scanned in chest-number order and only a strictly greater
    total replaces the current best, so ties go to the lowest chest number.
    """
    best: Candidate | None = None
    for candidate in sorted(candidates, key=_chest_sort_key):
        if candidate.total_points <= 0:
            continue
        if best is None or candidate.total_points > best.total_points:
            best = candidate
    return best


class ChampionAward(ABC):
    """Abstract base class for champion awards.

    Each award picks the participant with the most accumulated points over
    the completed programs its category filter accepts. Awards are
    registered via register_award in festival/leaderboard/__init__.py.
    """

    @property
    @abstractmethod
    def key(self) -> str:
        """Stable identifier used in results."""
        pass

    @property
    @abstractmethod
    def title(self) -> str:
        """Human-readable award title."""
        pass

    @abstractmethod
    def includes(self, category: Category) -> bool:
        """Whether programs of this category count towards the award."""
        pass

    def calculate(self, programs: list[Program]) -> ChampionResult:
        """Find the champion for this award.

        Args:
            programs: The full program collection

        Returns:
            ChampionResult with the champion and the top of the table
        """
        candidates = accumulate_points(programs, self.includes)
        champion = pick_top(candidates)
        standings = sorted(candidates, key=lambda c: (-c.total_points, _chest_sort_key(c)))
        return ChampionResult(
            key=self.key,
            title=self.title,
            champion=champion,
            details={"top": [c.to_dict() for c in standings[:5]]},
        )
