"""Program lifecycle state machine.

    PENDING --allocate--> JUDGING --submit scores--> COMPLETED
       ^                     |                           |
       +------ recall -------+                           |
                             ^------- re-evaluate -------+
    PENDING / JUDGING --cancel (confirmed)--> CANCELLED

Each transition function validates its guard against the current program and
returns the partial update to persist. Rejections raise LifecycleError with a
message suitable for showing to the user.
"""

from typing import Any

from festival.codes import all_codes_revealed
from festival.models import Program, ProgramStatus


class LifecycleError(ValueError):
    """Raised when a requested status change is not allowed."""
    pass


def selectable_statuses(program: Program) -> list[ProgramStatus]:
    """Statuses offered by the admin's raw status selector.

    COMPLETED is never selectable and JUDGING is only reached through
    allocation, so the selector only moves between PENDING and CANCELLED.
    Nothing is selectable while judging is in progress or after completion.
    """
    if program.status in (ProgramStatus.JUDGING, ProgramStatus.COMPLETED):
        return []
    return [ProgramStatus.PENDING, ProgramStatus.CANCELLED]


def set_status(program: Program, status: ProgramStatus, confirmed: bool = False) -> dict[str, Any]:
    """Apply a raw status selection made by an admin.

    Selecting CANCELLED goes through the confirmed cancel transition.
    """
    if program.status == ProgramStatus.JUDGING:
        raise LifecycleError(
            "This program is with the judges. Use Recall to bring it back "
            "or wait for the scores to be submitted."
        )
    if program.status == ProgramStatus.COMPLETED:
        raise LifecycleError(
            "This program is completed. Use Re-evaluate to send it back to the judges."
        )
    if status == ProgramStatus.COMPLETED:
        raise LifecycleError("A program can only be completed by submitting scores.")
    if status == ProgramStatus.JUDGING:
        raise LifecycleError("Use Allocate to Judge to start judging a program.")
    if status == ProgramStatus.CANCELLED:
        return cancel(program, confirmed)
    if program.status == ProgramStatus.CANCELLED:
        raise LifecycleError("A cancelled program cannot be reopened.")
    return {"status": status}


def toggle_publish(program: Program) -> dict[str, Any]:
    """Flip green-room visibility. Independent of status."""
    return {"is_published": not program.is_published}


def toggle_result_publish(program: Program) -> dict[str, Any]:
    """Flip public result visibility. Only completed programs have results."""
    if program.status != ProgramStatus.COMPLETED:
        raise LifecycleError("Results can only be published for completed programs.")
    return {"is_result_published": not program.is_result_published}


def allocate_to_judge(program: Program, judge_panel: str | None) -> dict[str, Any]:
    """PENDING -> JUDGING, once every code is revealed in the green room."""
    if program.status != ProgramStatus.PENDING:
        raise LifecycleError(
            f"Only pending programs can be allocated (current status: {program.status.value})."
        )
    if not program.is_published:
        raise LifecycleError("Publish the program to the green room before allocating it.")
    if not program.has_participants():
        raise LifecycleError("This program has no participants to judge.")
    if not all_codes_revealed(program):
        raise LifecycleError("Reveal every participant's code before allocating to a judge.")
    if not judge_panel or not judge_panel.strip():
        raise LifecycleError("Select a judge panel.")
    return {
        "status": ProgramStatus.JUDGING,
        "is_allocated_to_judge": True,
        "judge_panel": judge_panel.strip(),
    }


def recall_from_judge(program: Program) -> dict[str, Any]:
    """JUDGING -> PENDING, taking the program back from its judge panel."""
    if program.status != ProgramStatus.JUDGING:
        raise LifecycleError("Only programs being judged can be recalled.")
    return {
        "status": ProgramStatus.PENDING,
        "is_allocated_to_judge": False,
        "judge_panel": None,
    }


def check_can_submit_scores(program: Program) -> None:
    """Guard for JUDGING -> COMPLETED."""
    if program.status != ProgramStatus.JUDGING:
        raise LifecycleError(
            f"Scores can only be submitted while judging (current status: {program.status.value})."
        )


def re_evaluate(program: Program, confirmed: bool = False) -> dict[str, Any]:
    """COMPLETED -> JUDGING so judges can resubmit.

    Stored scores are kept until the new submission overwrites them. The
    results are withdrawn from the public page meanwhile.
    """
    if program.status != ProgramStatus.COMPLETED:
        raise LifecycleError("Only completed programs can be re-evaluated.")
    if not confirmed:
        raise LifecycleError("Re-evaluation must be confirmed.")
    return {
        "status": ProgramStatus.JUDGING,
        "is_allocated_to_judge": True,
        "is_result_published": False,
    }


def cancel(program: Program, confirmed: bool = False) -> dict[str, Any]:
    """PENDING or JUDGING -> CANCELLED, after confirmation."""
    if program.status not in (ProgramStatus.PENDING, ProgramStatus.JUDGING):
        raise LifecycleError(
            f"Only pending or judging programs can be cancelled (current status: {program.status.value})."
        )
    if not confirmed:
        raise LifecycleError("Cancellation must be confirmed.")
    return {"status": ProgramStatus.CANCELLED}
