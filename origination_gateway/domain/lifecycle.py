"""Origination state machine: allowed status transitions and next-step hints"""

from typing import Dict, FrozenSet
from origination_gateway.domain.models import Application, ApplicationStatus
from origination_gateway.domain.exceptions import InvalidStateError

S = ApplicationStatus

# Linear sequence; branches at identity verification (pass/fail) and at decision (approve/deny)
TRANSITIONS: Dict[ApplicationStatus, FrozenSet[ApplicationStatus]] = {
    S.SUBMITTED: frozenset({S.IDENTITY_VERIFIED, S.IDENTITY_VERIFICATION_FAILED}),
    S.IDENTITY_VERIFIED: frozenset({S.CREDIT_CHECKED}),
    S.IDENTITY_VERIFICATION_FAILED: frozenset(),
    S.CREDIT_CHECKED: frozenset({S.RISK_ASSESSED}),
    S.RISK_ASSESSED: frozenset({S.APPROVED, S.DENIED}),
    S.APPROVED: frozenset({S.ACTIVE}),
    S.DENIED: frozenset(),
    S.ACTIVE: frozenset(),
}


def advance(application: Application, new_status: ApplicationStatus) -> None:
    """Move the application to new_status, rejecting any non-forward transition"""
    if new_status not in TRANSITIONS[application.status]:
        raise InvalidStateError(
            f"Cannot move application from '{application.status.value}' to '{new_status.value}'",
            application_id=application.application_id,
            current_status=application.status.value,
        )
    application.status = new_status


def require(application: Application, condition: bool, message: str) -> None:
    """Raise InvalidStateError carrying the current status when a stage precondition fails"""
    if not condition:
        raise InvalidStateError(
            message,
            application_id=application.application_id,
            current_status=application.status.value,
        )


def next_step(application: Application) -> str:
    """
    Human-readable hint for the caller, derived only from flags and status.

    Precedence: identity -> credit -> risk -> decision -> activation -> terminal.
    """
    if application.status == S.IDENTITY_VERIFICATION_FAILED:
        return "Identity verification failed - application cannot proceed"
    if not application.identity_verified:
        return "Identity verification required"
    if not application.credit_checked:
        return "Credit check required"
    if not application.risk_assessed:
        return "Risk assessment required"
    if application.decision is None:
        return "Decision pending"
    if application.status == S.APPROVED and not application.card_activated:
        return "Card activation available"
    if application.status == S.ACTIVE:
        return "Application complete - card active"
    if application.status == S.DENIED:
        return "Application denied"
    return "Unknown"
