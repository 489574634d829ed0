"""Tests for the program lifecycle state machine."""

import pytest
from tests.conftest import make_program, ready_for_judging

from festival import lifecycle
from festival.lifecycle import LifecycleError
from festival.models import ProgramStatus


def program_in(status: ProgramStatus, **kwargs):
    return make_program({"PRUDENTIA": [201], "SAPIENTIA": [301]}, status=status, **kwargs)


class TestAllocateToJudge:
    def setup_method(self):
        self.program = ready_for_judging(make_program({"PRUDENTIA": [201], "SAPIENTIA": [301]}))

    def test_allocates(self):
        changes = lifecycle.allocate_to_judge(self.program, " Stage 2 ")
        assert changes == {
            "status": ProgramStatus.JUDGING,
            "is_allocated_to_judge": True,
            "judge_panel": "Stage 2",
        }

    def test_requires_published(self):
        self.program.is_published = False
        with pytest.raises(LifecycleError, match="Publish"):
            lifecycle.allocate_to_judge(self.program, "Stage 1")

    def test_requires_every_code_revealed(self):
        self.program.teams[1].participants[0].is_code_revealed = False
        with pytest.raises(LifecycleError, match="Reveal"):
            lifecycle.allocate_to_judge(self.program, "Stage 1")

    def test_requires_codes(self):
        self.program.teams[0].participants[0].code_letter = None
        with pytest.raises(LifecycleError, match="Reveal"):
            lifecycle.allocate_to_judge(self.program, "Stage 1")

    @pytest.mark.parametrize("panel", [None, "", "   "])
    def test_requires_panel(self, panel):
        with pytest.raises(LifecycleError, match="judge panel"):
            lifecycle.allocate_to_judge(self.program, panel)

    def test_requires_participants(self):
        program = make_program(is_published=True)
        with pytest.raises(LifecycleError, match="no participants"):
            lifecycle.allocate_to_judge(program, "Stage 1")

    @pytest.mark.parametrize("status", [
        ProgramStatus.JUDGING, ProgramStatus.COMPLETED, ProgramStatus.CANCELLED,
    ])
    def test_only_from_pending(self, status):
        self.program.status = status
        with pytest.raises(LifecycleError, match="Only pending"):
            lifecycle.allocate_to_judge(self.program, "Stage 1")


class TestRecall:
    def test_recall(self):
        program = program_in(ProgramStatus.JUDGING, is_allocated_to_judge=True, judge_panel="S1")
        assert lifecycle.recall_from_judge(program) == {
            "status": ProgramStatus.PENDING,
            "is_allocated_to_judge": False,
            "judge_panel": None,
        }

    def test_only_while_judging(self):
        with pytest.raises(LifecycleError):
            lifecycle.recall_from_judge(program_in(ProgramStatus.PENDING))


class TestSubmitGuard:
    def test_judging_allows_submission(self):
        lifecycle.check_can_submit_scores(program_in(ProgramStatus.JUDGING))

    @pytest.mark.parametrize("status", [
        ProgramStatus.PENDING, ProgramStatus.COMPLETED, ProgramStatus.CANCELLED,
    ])
    def test_other_states_reject(self, status):
        with pytest.raises(LifecycleError, match="while judging"):
            lifecycle.check_can_submit_scores(program_in(status))


class TestReEvaluate:
    def test_re_evaluate(self):
        program = program_in(ProgramStatus.COMPLETED, is_result_published=True)
        assert lifecycle.re_evaluate(program, confirmed=True) == {
            "status": ProgramStatus.JUDGING,
            "is_allocated_to_judge": True,
            "is_result_published": False,
        }

    def test_requires_confirmation(self):
        with pytest.raises(LifecycleError, match="confirmed"):
            lifecycle.re_evaluate(program_in(ProgramStatus.COMPLETED))

    def test_only_completed(self):
        with pytest.raises(LifecycleError, match="Only completed"):
            lifecycle.re_evaluate(program_in(ProgramStatus.JUDGING), confirmed=True)

    def test_keeps_scores(self):
        """Re-evaluation does not touch teams; old results stay until rescored."""
        changes = lifecycle.re_evaluate(program_in(ProgramStatus.COMPLETED), confirmed=True)
        assert "teams" not in changes


class TestCancel:
    @pytest.mark.parametrize("status", [ProgramStatus.PENDING, ProgramStatus.JUDGING])
    def test_cancel(self, status):
        changes = lifecycle.cancel(program_in(status), confirmed=True)
        assert changes == {"status": ProgramStatus.CANCELLED}

    def test_requires_confirmation(self):
        with pytest.raises(LifecycleError, match="confirmed"):
            lifecycle.cancel(program_in(ProgramStatus.PENDING))

    @pytest.mark.parametrize("status", [ProgramStatus.COMPLETED, ProgramStatus.CANCELLED])
    def test_rejects_other_states(self, status):
        with pytest.raises(LifecycleError):
            lifecycle.cancel(program_in(status), confirmed=True)


class TestSetStatus:
    def test_selectable_statuses(self):
        assert lifecycle.selectable_statuses(program_in(ProgramStatus.PENDING)) == [
            ProgramStatus.PENDING, ProgramStatus.CANCELLED,
        ]
        assert lifecycle.selectable_statuses(program_in(ProgramStatus.JUDGING)) == []
        assert lifecycle.selectable_statuses(program_in(ProgramStatus.COMPLETED)) == []

    def test_pending_to_pending(self):
        program = program_in(ProgramStatus.PENDING)
        assert lifecycle.set_status(program, ProgramStatus.PENDING) == {
            "status": ProgramStatus.PENDING,
        }

    def test_cancel_through_selector_needs_confirmation(self):
        program = program_in(ProgramStatus.PENDING)
        with pytest.raises(LifecycleError, match="confirmed"):
            lifecycle.set_status(program, ProgramStatus.CANCELLED)
        assert lifecycle.set_status(program, ProgramStatus.CANCELLED, confirmed=True) == {
            "status": ProgramStatus.CANCELLED,
        }

    @pytest.mark.parametrize("target", list(ProgramStatus))
    def test_cannot_leave_judging(self, target):
        with pytest.raises(LifecycleError, match="Recall"):
            lifecycle.set_status(program_in(ProgramStatus.JUDGING), target, confirmed=True)

    @pytest.mark.parametrize("target", list(ProgramStatus))
    def test_cannot_leave_completed(self, target):
        with pytest.raises(LifecycleError, match="Re-evaluate"):
            lifecycle.set_status(program_in(ProgramStatus.COMPLETED), target, confirmed=True)

    def test_completed_is_never_a_target(self):
        with pytest.raises(LifecycleError, match="submitting scores"):
            lifecycle.set_status(program_in(ProgramStatus.PENDING), ProgramStatus.COMPLETED)

    def test_judging_only_through_allocation(self):
        with pytest.raises(LifecycleError, match="Allocate"):
            lifecycle.set_status(program_in(ProgramStatus.PENDING), ProgramStatus.JUDGING)

    def test_cancelled_cannot_be_reopened(self):
        with pytest.raises(LifecycleError, match="reopened"):
            lifecycle.set_status(program_in(ProgramStatus.CANCELLED), ProgramStatus.PENDING)


class TestPublishToggles:
    @pytest.mark.parametrize("status", list(ProgramStatus))
    def test_toggle_publish_any_status(self, status):
        assert lifecycle.toggle_publish(program_in(status)) == {"is_published": True}
        assert lifecycle.toggle_publish(program_in(status, is_published=True)) == {
            "is_published": False,
        }

    def test_toggle_result_publish(self):
        program = program_in(ProgramStatus.COMPLETED)
        assert lifecycle.toggle_result_publish(program) == {"is_result_published": True}

    @pytest.mark.parametrize("status", [
        ProgramStatus.PENDING, ProgramStatus.JUDGING, ProgramStatus.CANCELLED,
    ])
    def test_result_publish_needs_completed(self, status):
        with pytest.raises(LifecycleError, match="completed"):
            lifecycle.toggle_result_publish(program_in(status))
