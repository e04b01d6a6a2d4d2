"""Unit tests for the series status machine"""

import pytest

from src.domain import status_machine
from src.domain.errors import InvalidTransitionError, TerminalStateError, ValidationError
from src.domain.recurring_invoice import RecurringInvoiceStatus as Status

ALL_STATUSES = list(Status)


class TestCheckTransition:
    @pytest.mark.parametrize(
        "current,target",
        [
            (Status.ACTIVE, Status.PAUSED),
            (Status.PAUSED, Status.ACTIVE),
            (Status.ACTIVE, Status.CANCELLED),
            (Status.PAUSED, Status.CANCELLED),
        ],
    )
    def test_allowed_user_transitions(self, current, target):
        assert status_machine.check_transition(current, target) is True

    @pytest.mark.parametrize("current", [Status.ACTIVE, Status.PAUSED])
    def test_same_state_is_a_no_op(self, current):
        assert status_machine.check_transition(current, current) is False

    @pytest.mark.parametrize("current", [Status.COMPLETED, Status.CANCELLED])
    @pytest.mark.parametrize("target", ALL_STATUSES)
    def test_every_target_from_terminal_state_raises(self, current, target):
        """
        Given: A completed or cancelled series
        When: Any status is requested, including the current one
        Then: TerminalStateError is raised
        """
        with pytest.raises(TerminalStateError):
            status_machine.check_transition(current, target)

    @pytest.mark.parametrize("current", [Status.ACTIVE, Status.PAUSED])
    def test_users_cannot_complete_a_series(self, current):
        with pytest.raises(InvalidTransitionError) as exc_info:
            status_machine.check_transition(current, Status.COMPLETED)

        assert exc_info.value.code == "INVALID_TRANSITION"
        assert isinstance(exc_info.value, ValidationError)

    def test_accepts_wire_strings(self):
        assert status_machine.check_transition("active", "paused") is True


class TestApplyTransition:
    def test_changes_status(self, make_series):
        series = make_series(status=Status.ACTIVE)

        changed = status_machine.apply_transition(series, Status.PAUSED)

        assert changed is True
        assert series.status == Status.PAUSED

    def test_no_op_leaves_series_untouched(self, make_series):
        series = make_series(status=Status.PAUSED)

        changed = status_machine.apply_transition(series, Status.PAUSED)

        assert changed is False
        assert series.status == Status.PAUSED

    def test_terminal_series_is_not_modified(self, make_series):
        series = make_series(status=Status.CANCELLED)

        with pytest.raises(TerminalStateError):
            status_machine.apply_transition(series, Status.ACTIVE)

        assert series.status == Status.CANCELLED


class TestComplete:
    def test_active_series_completes(self, make_series):
        series = make_series(status=Status.ACTIVE)

        status_machine.complete(series)

        assert series.status == Status.COMPLETED

    def test_paused_series_cannot_complete(self, make_series):
        with pytest.raises(InvalidTransitionError):
            status_machine.complete(make_series(status=Status.PAUSED))

    @pytest.mark.parametrize("current", [Status.COMPLETED, Status.CANCELLED])
    def test_terminal_series_cannot_complete(self, make_series, current):
        with pytest.raises(TerminalStateError):
            status_machine.complete(make_series(status=current))


class TestCanGenerate:
    @pytest.mark.parametrize(
        "current,expected",
        [
            (Status.ACTIVE, True),
            (Status.PAUSED, False),
            (Status.COMPLETED, False),
            (Status.CANCELLED, False),
        ],
    )
    def test_only_active_generates(self, current, expected):
        assert status_machine.can_generate(current) is expected
