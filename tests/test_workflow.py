import pytest

from app.core import workflow
from app.schemas.mentor_request import Actor, DecisionAction, MentorRequestStatus as S


def test_pending_only_moves_to_admin_states():
    assert workflow.TRANSITIONS[S.PENDING] == {S.ADMIN_APPROVED, S.ADMIN_REJECTED}
    assert not workflow.can_transition(S.PENDING, S.MENTOR_APPROVED)
    assert not workflow.can_transition(S.PENDING, S.MENTOR_REJECTED)


@pytest.mark.parametrize("status", [S.ADMIN_REJECTED, S.MENTOR_APPROVED, S.MENTOR_REJECTED])
def test_terminal_states(status):
    assert workflow.is_terminal(status)
    assert all(not workflow.can_transition(status, target) for target in S)


def test_mentor_cannot_decide_pending_request():
    assert workflow.next_status(S.PENDING, Actor.MENTOR, DecisionAction.APPROVE) is None


def test_admin_cannot_decide_twice():
    assert workflow.next_status(S.ADMIN_APPROVED, Actor.ADMIN, DecisionAction.REJECT) is None


@pytest.mark.parametrize(
    "current,actor,action,expected",
    [
        (S.PENDING, Actor.ADMIN, DecisionAction.APPROVE, S.ADMIN_APPROVED),
        (S.PENDING, Actor.ADMIN, DecisionAction.REJECT, S.ADMIN_REJECTED),
        (S.ADMIN_APPROVED, Actor.MENTOR, DecisionAction.APPROVE, S.MENTOR_APPROVED),
        (S.ADMIN_APPROVED, Actor.MENTOR, DecisionAction.REJECT, S.MENTOR_REJECTED),
    ],
)
def test_allowed_decisions(current, actor, action, expected):
    assert workflow.next_status(current, actor, action) == expected


def test_active_statuses_block_duplicates():
    assert set(workflow.ACTIVE_STATUSES) == {S.PENDING, S.ADMIN_APPROVED}
