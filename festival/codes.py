"""Code assignment: anonymous code letters for participants and sub-teams.

In the green room every judged unit (a participant in individual programs, a
sub-team chunk in group programs) gets a letter drawn from a shuffled pool.
Codes are then "scratched" open one unit at a time.
"""

import copy
import random
import string

from festival.models import Participant, Program, Team, judged_units


def code_label(index: int) -> str:
    """Letter code for a 0-based pool position: A..Z, then AA, AB, ..."""
    letters = string.ascii_uppercase
    label = ""
    index += 1
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        label = letters[remainder] + label
    return label


def build_pool(needed: int, taken: set[str], rng: random.Random) -> list[str]:
    """Build a shuffled pool of ``needed`` codes that avoids ``taken`` codes.

    When nothing is taken this is a permutation of the first ``needed``
    letters. Codes held by other units are skipped so that the final
    assignment stays collision free.
    """
    pool: list[str] = []
    index = 0
    while len(pool) < needed:
        label = code_label(index)
        if label not in taken:
            pool.append(label)
        index += 1
    rng.shuffle(pool)
    return pool


def _units(program: Program, teams: list[Team]) -> list[list[Participant]]:
    return [members for _, members in judged_units(teams, program.is_group, program.member_limit)]


def assign_codes(
    program: Program,
    rng: random.Random | None = None,
    reveal_chest: str | None = None,
) -> list[Team]:
    """Assign code letters to every unit that does not have one yet.

    Units that already carry a code keep it and do not consume a pool slot,
    so calling this repeatedly never reassigns anything. Every member of a
    group chunk ends up with the chunk's code.

    Args:
        program: The program to process (not modified)
        rng: Random source used to shuffle the pool
        reveal_chest: Optionally reveal the unit containing this chest number
            in the same pass, so assignment and reveal are a single write

    Returns:
        A new list of Team records with codes applied.
    """
    rng = rng or random.Random()
    teams = copy.deepcopy(program.teams)
    units = _units(program, teams)

    existing = [next((p.code_letter for p in members if p.code_letter), None) for members in units]
    taken = {code for code in existing if code}
    pool = build_pool(sum(1 for code in existing if not code), taken, rng)

    next_slot = iter(pool)
    for members, code in zip(units, existing):
        unit_code = code or next(next_slot)
        revealing = reveal_chest is not None and any(p.chest_number == reveal_chest for p in members)
        for participant in members:
            participant.code_letter = unit_code
            if revealing:
                participant.is_code_revealed = True

    return teams


def reveal_code(program: Program, chest_number: str) -> list[Team]:
    """Reveal the code of the unit containing ``chest_number``.

    For group programs the whole chunk sharing the code is revealed; for
    individual programs only that participant. Revealing is one-way. A
    participant without a code is left untouched.
    """
    teams = copy.deepcopy(program.teams)
    for members in _units(program, teams):
        target = next((p for p in members if p.chest_number == chest_number), None)
        if target is None or not target.code_letter:
            continue
        for participant in members:
            if participant.code_letter == target.code_letter:
                participant.is_code_revealed = True
    return teams


def needs_assignment(program: Program, chest_number: str) -> bool:
    """Whether revealing this participant first requires assigning codes."""
    participant = program.find_participant(chest_number)
    return participant is not None and not participant.code_letter


def all_codes_revealed(program: Program) -> bool:
    """Every participant has a code and it has been revealed."""
    participants = program.all_participants()
    return bool(participants) and all(p.code_letter and p.is_code_revealed for p in participants)
