"""Core data models for festival programs, teams and participants."""

import copy
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Self

from festival.categories import Category, classify_category


class ProgramStatus(str, Enum):
    """Lifecycle state of a program."""
    PENDING = "PENDING"
    JUDGING = "JUDGING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _dump(obj: Any) -> dict[str, Any]:
    """Serialize a dataclass to a camelCase document, dropping unset optionals."""
    doc: dict[str, Any] = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if value is None:
            continue
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, list):
            value = [item.to_dict() if hasattr(item, "to_dict") else item for item in value]
        doc[_camel(f.name)] = value
    return doc


def _load_kwargs(cls: type, doc: dict[str, Any]) -> dict[str, Any]:
    """Pick the dataclass fields of ``cls`` out of a camelCase document."""
    kwargs = {}
    for f in fields(cls):
        key = _camel(f.name)
        if key in doc:
            kwargs[f.name] = doc[key]
        elif f.name in doc:
            kwargs[f.name] = doc[f.name]
    return kwargs


@dataclass
class Participant:
    """One person's registration under one team within one program.

    Attributes:
        name: Display name
        chest_number: Festival-wide badge id; its integer value decides the home team
        code_letter: Anonymous code assigned in the green room
        is_code_revealed: Whether the code has been "scratched" open
        role: Free-text role within a group performance
        score: Raw judge score (0-100), set when judged
        grade: Letter grade, set when judged
        points: Normalized points, set when judged
        rank: 1-based position within the program, set when judged
    """
    name: str
    chest_number: str
    code_letter: str | None = None
    is_code_revealed: bool = False
    role: str | None = None
    score: float | None = None
    grade: str | None = None
    points: float | None = None
    rank: int | None = None

    @property
    def chest_value(self) -> int | None:
        """Integer value of the chest number, or None if it is not numeric."""
        try:
            return int(str(self.chest_number).strip())
        except ValueError:
            return None

    def to_dict(self) -> dict[str, Any]:
        return _dump(self)

    @classmethod
    def from_dict(cls, doc: dict[str, Any]) -> Self:
        kwargs = _load_kwargs(cls, doc)
        kwargs["chest_number"] = str(kwargs.get("chest_number", ""))
        kwargs["is_code_revealed"] = bool(kwargs.get("is_code_revealed", False))
        return cls(**kwargs)


@dataclass
class Team:
    """A festival team's roster entry within one program.

    The result fields (score, rank, grade, points) are only set once the
    program is completed.
    """
    id: str
    team_name: str
    participants: list[Participant] = field(default_factory=list)
    score: float | None = None
    rank: int | None = None
    grade: str | None = None
    points: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return _dump(self)

    @classmethod
    def from_dict(cls, doc: dict[str, Any]) -> Self:
        kwargs = _load_kwargs(cls, doc)
        kwargs["id"] = str(kwargs.get("id", ""))
        kwargs["participants"] = [
            p if isinstance(p, Participant) else Participant.from_dict(p)
            for p in kwargs.get("participants") or []
        ]
        return cls(**kwargs)


@dataclass
class Program:
    """One competitive event at the festival.

    Attributes:
        id: Document id assigned by the store (None until created)
        name: Program name
        category: Free-text classification, e.g. "B zone stage senior"
        status: Lifecycle state
        teams: Team entries, in insertion order
        is_group: Whether teams perform as groups
        participants_count: Capacity for the program
        group_count: Number of groups allowed (group programs)
        members_per_group: Sub-team size (group programs)
        start_time: Free-text start time, used for ordering only
        is_published: Visible in the green room
        is_allocated_to_judge: Handed to a judge panel
        judge_panel: Name of the assigned judge panel
        is_result_published: Visible on the public results page
    """
    name: str
    category: str
    id: str | None = None
    status: ProgramStatus = ProgramStatus.PENDING
    teams: list[Team] = field(default_factory=list)
    is_group: bool = False
    participants_count: int = 0
    group_count: int | None = None
    members_per_group: int | None = None
    start_time: str | None = None
    venue: str | None = None
    description: str = ""
    is_published: bool = False
    is_allocated_to_judge: bool = False
    judge_panel: str | None = None
    is_result_published: bool = False

    @property
    def tags(self) -> Category:
        """Structured zone/stage/age classification of the category text."""
        return classify_category(self.category)

    @property
    def member_limit(self) -> int | None:
        """Sub-team size for group programs, or None when unbounded."""
        if self.is_group and self.members_per_group and self.members_per_group > 0:
            return self.members_per_group
        return None

    def all_participants(self) -> list[Participant]:
        return [p for team in self.teams for p in team.participants]

    def find_participant(self, chest_number: str) -> Participant | None:
        for participant in self.all_participants():
            if participant.chest_number == chest_number:
                return participant
        return None

    def has_participants(self) -> bool:
        return any(team.participants for team in self.teams)

    def sub_teams(self) -> list[tuple[Team, list[Participant]]]:
        """Return every judged unit as a (team, members) pair.

        Individual programs yield one single-member unit per participant;
        group programs yield one unit per chunk of each team's roster.
        """
        return judged_units(self.teams, self.is_group, self.member_limit)

    def updated(self, changes: dict[str, Any]) -> Self:
        """Return a copy with a partial update applied; other fields are untouched."""
        unknown = set(changes) - {f.name for f in fields(self)}
        if unknown:
            raise ValueError(f"Unknown program fields: {', '.join(sorted(unknown))}")
        return replace(copy.deepcopy(self), **copy.deepcopy(changes))

    def to_dict(self) -> dict[str, Any]:
        return _dump(self)

    @classmethod
    def from_dict(cls, doc: dict[str, Any]) -> Self:
        kwargs = _load_kwargs(cls, doc)
        kwargs["status"] = ProgramStatus(kwargs.get("status", ProgramStatus.PENDING))
        kwargs["teams"] = [
            t if isinstance(t, Team) else Team.from_dict(t)
            for t in kwargs.get("teams") or []
        ]
        for flag in ("is_group", "is_published", "is_allocated_to_judge", "is_result_published"):
            kwargs[flag] = bool(kwargs.get(flag, False))
        kwargs["participants_count"] = int(kwargs.get("participants_count") or 0)
        kwargs.setdefault("description", "")
        if kwargs["description"] is None:
            kwargs["description"] = ""
        return cls(**kwargs)


def chunk(participants: list[Participant], limit: int | None) -> list[list[Participant]]:
    """Split a roster into consecutive sub-teams of at most ``limit`` members.

    The last chunk may be smaller. A missing or non-positive limit keeps the
    whole roster together. An empty roster has no chunks.

    Example:
        >>> [len(c) for c in chunk(roster_of_seven, 3)]
        [3, 3, 1]
    """
    if not participants:
        return []
    if not limit or limit <= 0:
        return [list(participants)]
    return [participants[i:i + limit] for i in range(0, len(participants), limit)]


def judged_units(
    teams: list[Team], is_group: bool, limit: int | None
) -> list[tuple[Team, list[Participant]]]:
    """Pair every independently judged unit with the team it belongs to."""
    units = []
    for team in teams:
        if is_group:
            for members in chunk(team.participants, limit):
                units.append((team, members))
        else:
            for participant in team.participants:
                units.append((team, [participant]))
    return units
