"""Seed a JSON program store with fake programs and registrations.

Generates programs across zones, stage types and age groups, registers fake
participants from both teams with a fixed seed, and optionally scores some
programs so the leaderboard has data.

Usage:
    python scripts/seed_programs.py
    python scripts/seed_programs.py -o data/programs.json --programs 30 --completed 10
"""

import argparse
import json
import random
import sys
from pathlib import Path

from faker import Faker

sys.path.insert(0, str(Path(__file__).parent.parent))

from festival.config import DEFAULT_CONFIG
from festival.models import Participant, Program, Team
from festival.points import grade_from_score
from festival.scoring import ScoreEntry, score_program

DEFAULT_OUTPUT = Path(__file__).parent.parent / "data" / "programs.json"

SEED = 20261017

ZONE_LABELS = ["A zone", "B zone", "C zone"]
STAGE_LABELS = ["stage", "off stage", "general"]
AGE_LABELS = ["junior", "senior"]
VENUES = ["Main Stage", "Hall 2", "Open Air Theatre", "Seminar Room"]
PROGRAM_NAMES = [
    "Elocution", "Poem Recitation", "Essay Writing", "Group Song", "Quiz",
    "Calligraphy", "Story Telling", "Debate", "Painting", "Mime",
]


def make_roster(fake: Faker, rng: random.Random, per_team: int) -> list[Team]:
    """One team per configured identity, with chest numbers from its range."""
    teams = []
    for identity in DEFAULT_CONFIG.teams:
        chests = rng.sample(range(identity.chest_min, identity.chest_max + 1), per_team)
        teams.append(Team(
            id=f"t-{identity.name.lower()}-{fake.hexify('^^^^^^')}",
            team_name=identity.name,
            participants=[
                Participant(name=fake.name(), chest_number=str(chest))
                for chest in sorted(chests)
            ],
        ))
    return teams


def generate_programs(count: int, completed: int, seed: int) -> list[Program]:
    """Build ``count`` programs; the first ``completed`` are judged."""
    fake = Faker("en_IN")
    Faker.seed(seed)
    rng = random.Random(seed)

    programs = []
    for index in range(count):
        is_group = rng.random() < 0.3
        category = " ".join([
            rng.choice(ZONE_LABELS), rng.choice(STAGE_LABELS), rng.choice(AGE_LABELS)
        ])
        program = Program(
            id=f"p{index + 1:03d}",
            name=f"{rng.choice(PROGRAM_NAMES)} {index + 1}",
            category=category,
            start_time=f"2026-11-{1 + index // 8:02d}T{9 + index % 8:02d}:00",
            venue=rng.choice(VENUES),
            is_group=is_group,
            participants_count=8 if is_group else 6,
            members_per_group=4 if is_group else None,
            teams=make_roster(fake, rng, 4 if is_group else rng.randint(1, 3)),
            is_published=True,
        )
        if index < completed:
            program = judge(program, rng)
        programs.append(program)
    return programs


def judge(program: Program, rng: random.Random) -> Program:
    """Score every participant with random marks and complete the program."""
    scores = {}
    for participant in program.all_participants():
        score = rng.randint(20, 98)
        scores[participant.chest_number] = ScoreEntry(score, grade_from_score(score))
    result = score_program(program, scores)
    return program.updated({
        **result.to_update(),
        "is_result_published": rng.random() < 0.7,
    })


def write_programs(path: Path, programs: list[Program]) -> None:
    """Write programs in the document format read by the JSON file store."""
    path.parent.mkdir(parents=True, exist_ok=True)
    docs = [program.to_dict() for program in programs]
    path.write_text(json.dumps(docs, indent=2, ensure_ascii=False), encoding="utf-8")


def main():
    parser = argparse.ArgumentParser(
        description="Seed a JSON program store with fake data")
    parser.add_argument("-o", "--output", default=str(DEFAULT_OUTPUT),
                        help=f"Output path (default: {DEFAULT_OUTPUT})")
    parser.add_argument("--programs", type=int, default=24,
                        help="Number of programs to generate")
    parser.add_argument("--completed", type=int, default=8,
                        help="How many of them to judge")
    parser.add_argument("--seed", type=int, default=SEED,
                        help=f"Random seed (default: {SEED})")
    args = parser.parse_args()

    programs = generate_programs(args.programs, min(args.completed, args.programs), args.seed)
    output_path = Path(args.output)
    write_programs(output_path, programs)

    participants = {p.chest_number for program in programs for p in program.all_participants()}
    print(f"Generated {len(programs)} programs with {len(participants)} participants")
    print(f"Written to {output_path}")


if __name__ == "__main__":
    main()
