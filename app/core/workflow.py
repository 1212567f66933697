"""Mentor request lifecycle.

    pending ──admin──> admin_approved ──mentor──> mentor_approved
       │                     │
       └──admin──> admin_rejected    └──mentor──> mentor_rejected

Every state other than pending and admin_approved is terminal.
"""

from app.schemas.mentor_request import Actor, DecisionAction, MentorRequestStatus

TRANSITIONS: dict[MentorRequestStatus, set[MentorRequestStatus]] = {
    MentorRequestStatus.PENDING: {
        MentorRequestStatus.ADMIN_APPROVED,
        MentorRequestStatus.ADMIN_REJECTED,
    },
    MentorRequestStatus.ADMIN_APPROVED: {
        MentorRequestStatus.MENTOR_APPROVED,
        MentorRequestStatus.MENTOR_REJECTED,
    },
    MentorRequestStatus.ADMIN_REJECTED: set(),
    MentorRequestStatus.MENTOR_APPROVED: set(),
    MentorRequestStatus.MENTOR_REJECTED: set(),
}

# Requests in these states block a new request for the same user and mentor.
ACTIVE_STATUSES = (MentorRequestStatus.PENDING, MentorRequestStatus.ADMIN_APPROVED)

# What a mentor is allowed to see; pending and admin_rejected never reach them.
MENTOR_VISIBLE_STATUSES = (
    MentorRequestStatus.ADMIN_APPROVED,
    MentorRequestStatus.MENTOR_APPROVED,
    MentorRequestStatus.MENTOR_REJECTED,
)

_REQUIRED_STATUS = {
    Actor.ADMIN: MentorRequestStatus.PENDING,
    Actor.MENTOR: MentorRequestStatus.ADMIN_APPROVED,
}

_TARGETS = {
    (Actor.ADMIN, DecisionAction.APPROVE): MentorRequestStatus.ADMIN_APPROVED,
    (Actor.ADMIN, DecisionAction.REJECT): MentorRequestStatus.ADMIN_REJECTED,
    (Actor.MENTOR, DecisionAction.APPROVE): MentorRequestStatus.MENTOR_APPROVED,
    (Actor.MENTOR, DecisionAction.REJECT): MentorRequestStatus.MENTOR_REJECTED,
}


def is_terminal(status: MentorRequestStatus) -> bool:
    return not TRANSITIONS[status]


def can_transition(current: MentorRequestStatus, target: MentorRequestStatus) -> bool:
    return target in TRANSITIONS[current]


def required_status(actor: Actor) -> MentorRequestStatus:
    return _REQUIRED_STATUS[actor]


def target_status(actor: Actor, action: DecisionAction) -> MentorRequestStatus:
    return _TARGETS[(actor, action)]


def next_status(
    current: MentorRequestStatus, actor: Actor, action: DecisionAction
) -> MentorRequestStatus | None:
    """Status the request moves to, or None when the actor may not decide now."""
    if current != _REQUIRED_STATUS[actor]:
        return None
    target = _TARGETS[(actor, action)]
    return target if can_transition(current, target) else None
