"""Unit tests for status transitions and next-step hints"""

import pytest
from datetime import datetime, timezone
from origination_gateway.domain.exceptions import InvalidStateError
from origination_gateway.domain.lifecycle import TRANSITIONS, advance, next_step
from origination_gateway.domain.models import Application, ApplicationStatus
from origination_gateway.services.origination import validate_intake


@pytest.fixture
def application(intake) -> Application:
    return Application(
        application_id="APP-LIFECYCLE",
        intake=validate_intake(intake),
        submitted_at=datetime.now(timezone.utc),
    )


def test_advance_forward(application):
    advance(application, ApplicationStatus.IDENTITY_VERIFIED)
    advance(application, ApplicationStatus.CREDIT_CHECKED)
    assert application.status is ApplicationStatus.CREDIT_CHECKED


def test_advance_rejects_skips_and_rewinds(application):
    with pytest.raises(InvalidStateError) as exc_info:
        advance(application, ApplicationStatus.APPROVED)
    assert exc_info.value.current_status == "submitted"
    assert application.status is ApplicationStatus.SUBMITTED

    advance(application, ApplicationStatus.IDENTITY_VERIFIED)
    with pytest.raises(InvalidStateError):
        advance(application, ApplicationStatus.SUBMITTED)


def test_active_only_reachable_from_approved():
    sources = [status for status, targets in TRANSITIONS.items() if ApplicationStatus.ACTIVE in targets]
    assert sources == [ApplicationStatus.APPROVED]


def test_terminal_statuses():
    terminal = {status for status, targets in TRANSITIONS.items() if not targets}
    assert terminal == {
        ApplicationStatus.IDENTITY_VERIFICATION_FAILED,
        ApplicationStatus.DENIED,
        ApplicationStatus.ACTIVE,
    }


def test_next_step_after_identity_failure(application):
    assert next_step(application) == "Identity verification required"

    advance(application, ApplicationStatus.IDENTITY_VERIFICATION_FAILED)
    assert next_step(application) == "Identity verification failed - application cannot proceed"
