"""Workflow service: every mutating festival operation, run against a store.

Each method checks the session's role, loads the current program, asks the
pure engines (lifecycle, codes, scoring, registration, reconcile) for the
partial update and writes it back. Failures are returned, not raised:
single-program operations return an OperationResult and multi-program
operations return a BatchResult.
"""

import asyncio
import logging
import random
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from festival import codes, lifecycle
from festival.config import DEFAULT_CONFIG, FestivalConfig
from festival.lifecycle import LifecycleError
from festival.models import Program, ProgramStatus
from festival.reconcile import FixReport, changed_programs, generate_fix_report
from festival.registration import (
    Registration,
    RegistrationError,
    apply_registration,
    remove_participant,
    validate_registration,
)
from festival.scoring import ScoreEntry, score_program
from festival.session import PermissionDenied, Role, Session
from festival.standings import LeaderboardResult, calculate_leaderboard
from festival.stats import FestivalStats, festival_stats
from festival.store.base import ProgramNotFound, ProgramStore, StoreError
from festival.views import visible_programs

logger = logging.getLogger(__name__)

# Fields an admin may change through edit_program
EDITABLE_FIELDS = frozenset({
    "name",
    "category",
    "start_time",
    "venue",
    "description",
    "is_group",
    "participants_count",
    "group_count",
    "members_per_group",
})

STAFF = (Role.ADMIN, Role.GREENROOM)


@dataclass
class OperationResult:
    """Outcome of an operation on one program.

    Attributes:
        ok: Whether the change was written
        message: Short human-readable outcome
        program_id: The program operated on
        not_found: The program no longer exists
    """
    ok: bool
    message: str = ""
    program_id: str | None = None
    not_found: bool = False


@dataclass
class BatchResult:
    """Outcome of an operation that writes several programs.

    Writes are independent; succeeded writes are kept even if others fail.
    ``error`` is set when the operation was rejected before writing anything.
    """
    succeeded: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def attempted(self) -> int:
        return len(self.succeeded) + len(self.failed)

    @property
    def ok(self) -> bool:
        return self.error is None and not self.failed

    @property
    def message(self) -> str:
        if self.error:
            return self.error
        if self.failed:
            return f"Updated {len(self.succeeded)} of {self.attempted} programs."
        return f"Updated {len(self.succeeded)} programs."


class FestivalService:
    """Runs festival workflows for one session against a program store.

    Args:
        store: Where programs are read from and written to
        session: The acting user; decides which operations are allowed
        config: Team identities, rank points and registration limits
        rng: Random source for code shuffling (seed it for repeatable codes)
    """

    def __init__(
        self,
        store: ProgramStore,
        session: Session,
        config: FestivalConfig = DEFAULT_CONFIG,
        rng: random.Random | None = None,
    ):
        self.store = store
        self.session = session
        self.config = config
        self.rng = rng or random.Random()

    async def _run(
        self,
        program_id: str,
        action: str,
        build: Callable[[Program], dict[str, Any]],
        roles: tuple[Role, ...],
        done: str,
    ) -> OperationResult:
        """Load a program, compute its partial update, and write it."""
        try:
            self.session.require(*roles)
            program = await self.store.get(program_id)
            changes = build(program)
            await self.store.update(program_id, changes)
        except ProgramNotFound:
            logger.warning("%s: program %s not found", action, program_id)
            return OperationResult(False, "Program not found.", program_id, not_found=True)
        except (LifecycleError, PermissionDenied) as e:
            return OperationResult(False, str(e), program_id)
        except StoreError as e:
            logger.error("%s: failed to write program %s: %s", action, program_id, e)
            return OperationResult(False, f"Could not save changes: {e}", program_id)

        logger.info("%s: program %s (%s)", action, program_id, program.name)
        return OperationResult(True, done, program_id)

    async def _write_all(self, updates: Mapping[str, dict[str, Any]]) -> BatchResult:
        """Write several programs concurrently and collect per-program outcomes."""
        ids = list(updates)
        outcomes = await asyncio.gather(
            *(self.store.update(program_id, updates[program_id]) for program_id in ids),
            return_exceptions=True,
        )
        result = BatchResult()
        for program_id, outcome in zip(ids, outcomes):
            if isinstance(outcome, StoreError):
                logger.error("Failed to write program %s: %s", program_id, outcome)
                result.failed.append(program_id)
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                result.succeeded.append(program_id)
        if result.failed:
            logger.error("%d of %d program writes failed", len(result.failed), result.attempted)
        return result

    # Reads

    async def list_programs(self) -> list[Program]:
        """The program list this session's role sees by default."""
        return visible_programs(await self.store.list_once(), self.session)

    async def leaderboard(self) -> LeaderboardResult:
        return calculate_leaderboard(await self.store.list_once(), self.config)

    async def stats(self) -> FestivalStats:
        return festival_stats(await self.store.list_once())

    # Program administration

    async def create_program(self, program: Program) -> OperationResult:
        """Store a new program. It always starts PENDING and unpublished."""
        fresh = program.updated({
            "id": None,
            "status": ProgramStatus.PENDING,
            "is_published": False,
            "is_allocated_to_judge": False,
            "judge_panel": None,
            "is_result_published": False,
        })
        try:
            self.session.require(Role.ADMIN)
            program_id = await self.store.create(fresh)
        except PermissionDenied as e:
            return OperationResult(False, str(e))
        except StoreError as e:
            logger.error("Failed to create program %s: %s", program.name, e)
            return OperationResult(False, f"Could not create program: {e}")
        logger.info("Created program %s (%s)", program_id, program.name)
        return OperationResult(True, "Program created.", program_id)

    async def edit_program(self, program_id: str, changes: dict[str, Any]) -> OperationResult:
        """Change descriptive and capacity fields. Lifecycle fields are rejected."""
        def build(program: Program) -> dict[str, Any]:
            forbidden = set(changes) - EDITABLE_FIELDS
            if forbidden:
                raise LifecycleError(
                    f"These fields cannot be edited directly: {', '.join(sorted(forbidden))}"
                )
            return dict(changes)

        return await self._run(program_id, "Edit", build, (Role.ADMIN,), "Program updated.")

    async def delete_program(self, program_id: str) -> OperationResult:
        try:
            self.session.require(Role.ADMIN)
            await self.store.delete(program_id)
        except ProgramNotFound:
            logger.warning("Delete: program %s not found", program_id)
            return OperationResult(False, "Program not found.", program_id, not_found=True)
        except PermissionDenied as e:
            return OperationResult(False, str(e), program_id)
        except StoreError as e:
            logger.error("Delete: failed to delete program %s: %s", program_id, e)
            return OperationResult(False, f"Could not delete program: {e}", program_id)
        logger.info("Deleted program %s", program_id)
        return OperationResult(True, "Program deleted.", program_id)

    async def remove_participant(self, program_id: str, chest_number: str) -> OperationResult:
        """Take one participant out of one program."""
        return await self._run(
            program_id, "Remove participant",
            lambda program: {"teams": remove_participant(program, chest_number)},
            (Role.ADMIN,), "Participant removed.",
        )

    # Lifecycle

    async def toggle_publish(self, program_id: str) -> OperationResult:
        return await self._run(
            program_id, "Toggle publish", lifecycle.toggle_publish, STAFF, "Visibility updated."
        )

    async def toggle_result_publish(self, program_id: str) -> OperationResult:
        return await self._run(
            program_id, "Toggle result publish", lifecycle.toggle_result_publish,
            (Role.ADMIN,), "Result visibility updated.",
        )

    async def set_status(
        self, program_id: str, status: ProgramStatus, confirmed: bool = False
    ) -> OperationResult:
        return await self._run(
            program_id, f"Set status {status.value}",
            lambda program: lifecycle.set_status(program, status, confirmed),
            (Role.ADMIN,), "Status updated.",
        )

    async def cancel(self, program_id: str, confirmed: bool = False) -> OperationResult:
        return await self._run(
            program_id, "Cancel",
            lambda program: lifecycle.cancel(program, confirmed),
            (Role.ADMIN,), "Program cancelled.",
        )

    async def allocate_to_judge(self, program_id: str, judge_panel: str | None) -> OperationResult:
        return await self._run(
            program_id, "Allocate",
            lambda program: lifecycle.allocate_to_judge(program, judge_panel),
            STAFF, f"Allocated to {judge_panel}.",
        )

    async def recall(self, program_id: str) -> OperationResult:
        return await self._run(
            program_id, "Recall", lifecycle.recall_from_judge, STAFF, "Recalled from judge."
        )

    async def re_evaluate(self, program_id: str, confirmed: bool = False) -> OperationResult:
        return await self._run(
            program_id, "Re-evaluate",
            lambda program: lifecycle.re_evaluate(program, confirmed),
            (Role.ADMIN,), "Sent back to the judges.",
        )

    # Green room

    async def assign_codes(self, program_id: str) -> OperationResult:
        return await self._run(
            program_id, "Assign codes",
            lambda program: {"teams": codes.assign_codes(program, self.rng)},
            STAFF, "Codes assigned.",
        )

    async def reveal_code(self, program_id: str, chest_number: str) -> OperationResult:
        """Reveal a participant's code, assigning codes first in the same write if needed."""
        def build(program: Program) -> dict[str, Any]:
            if program.find_participant(chest_number) is None:
                raise LifecycleError(f"No participant with chest number {chest_number} in this program.")
            if codes.needs_assignment(program, chest_number):
                return {"teams": codes.assign_codes(program, self.rng, reveal_chest=chest_number)}
            return {"teams": codes.reveal_code(program, chest_number)}

        return await self._run(program_id, "Reveal code", build, STAFF, "Code revealed.")

    # Judging

    async def submit_scores(
        self, program_id: str, scores: Mapping[str, ScoreEntry]
    ) -> OperationResult:
        """Score and rank the program and mark it COMPLETED in one write."""
        def build(program: Program) -> dict[str, Any]:
            lifecycle.check_can_submit_scores(program)
            panel = self.session.judge_panel
            if self.session.role == Role.JUDGE and panel and program.judge_panel != panel:
                raise PermissionDenied(f"This program is assigned to {program.judge_panel}.")
            return score_program(program, scores, self.config).to_update()

        return await self._run(
            program_id, "Submit scores", build, (Role.ADMIN, Role.JUDGE), "Scores submitted."
        )

    # Team leaders

    def _acting_team(self, team_name: str | None) -> str:
        if self.session.role == Role.TEAMLEADER:
            team_name = team_name or self.session.team_name
        if not team_name:
            raise RegistrationError("Select a team.")
        self.session.require_team(team_name)
        return team_name

    async def register_participant(
        self,
        registration: Registration,
        team_name: str | None = None,
        editing: str | None = None,
    ) -> BatchResult:
        """Add a participant to programs, or re-register one being edited.

        Args:
            registration: Name, chest number and selected program ids
            team_name: Team to register under (defaults to a leader's own team)
            editing: Chest number of the participant being edited, if any
        """
        try:
            team = self._acting_team(team_name)
            programs = await self.store.list_once()
            validate_registration(programs, team, registration, editing, self.config)
            changes = apply_registration(programs, team, registration, editing)
        except (RegistrationError, PermissionDenied) as e:
            return BatchResult(error=str(e))
        except StoreError as e:
            logger.error("Registration: failed to load programs: %s", e)
            return BatchResult(error=f"Could not load programs: {e}")

        result = await self._write_all({pid: {"teams": teams} for pid, teams in changes.items()})
        logger.info(
            "Registered %s (%s) for %s: %d programs written",
            registration.name, registration.chest_number, team, len(result.succeeded),
        )
        return result

    async def delete_participant(self, chest_number: str, team_name: str | None = None) -> BatchResult:
        """Remove a chest number from every program, optionally only from one team."""
        try:
            if self.session.role == Role.TEAMLEADER:
                team_name = self._acting_team(team_name)
            else:
                self.session.require(Role.ADMIN)
            programs = await self.store.list_once()
        except (RegistrationError, PermissionDenied) as e:
            return BatchResult(error=str(e))
        except StoreError as e:
            logger.error("Delete participant: failed to load programs: %s", e)
            return BatchResult(error=f"Could not load programs: {e}")

        updates = {}
        for program in programs:
            teams = remove_participant(program, chest_number, team_name)
            if teams != program.teams:
                updates[program.id] = {"teams": teams}
        result = await self._write_all(updates)
        logger.info("Deleted participant %s from %d programs", chest_number, len(result.succeeded))
        return result

    # Maintenance

    async def preview_team_fix(self) -> FixReport:
        """List the moves and removals reconciliation would make, without writing."""
        return generate_fix_report(await self.store.list_once(), self.config)

    async def fix_team_assignments(self) -> BatchResult:
        """Rebuild team rosters from chest numbers, writing only programs that change."""
        try:
            self.session.require(Role.ADMIN)
            programs = await self.store.list_once()
        except PermissionDenied as e:
            return BatchResult(error=str(e))
        except StoreError as e:
            logger.error("Team fix: failed to load programs: %s", e)
            return BatchResult(error=f"Could not load programs: {e}")

        fixed = changed_programs(programs, self.config)
        result = await self._write_all({program.id: {"teams": program.teams} for program in fixed})
        logger.info("Team fix: wrote %d of %d programs", len(result.succeeded), len(programs))
        return result
