"""Unit tests for the keyed application stores"""

import pytest
import threading
from datetime import datetime, timezone
from origination_gateway.domain.models import Application, ApplicationStatus
from origination_gateway.infrastructure.store.base import KeyedLock, from_payload, to_payload
from origination_gateway.services.origination import validate_intake


@pytest.fixture
def application(intake) -> Application:
    return Application(
        application_id="APP-TEST",
        intake=validate_intake(intake),
        submitted_at=datetime(2026, 1, 2, tzinfo=timezone.utc),
    )


@pytest.fixture(params=["memory", "sql"])
def any_store(request, store, sql_store):
    return store if request.param == "memory" else sql_store


def test_payload_preserves_types(application):
    payload = to_payload(application)

    assert payload["status"] == "submitted"
    assert isinstance(payload["submitted_at"], str)

    restored = from_payload(payload)
    assert restored.status is ApplicationStatus.SUBMITTED
    assert restored.submitted_at == application.submitted_at
    assert restored.intake.address.zip_code == "78701"


def test_get_missing_returns_none(any_store):
    assert any_store.get("APP-MISSING") is None


def test_get_returns_detached_copy(any_store, application):
    any_store.set(application)

    loaded = any_store.get("APP-TEST")
    loaded.status = ApplicationStatus.IDENTITY_VERIFIED

    assert any_store.get("APP-TEST").status is ApplicationStatus.SUBMITTED


def test_compare_and_swap_bumps_version(any_store, application):
    any_store.set(application)

    loaded = any_store.get("APP-TEST")
    loaded.status = ApplicationStatus.IDENTITY_VERIFIED
    loaded.identity_verified = True

    assert any_store.compare_and_swap(loaded, expected_version=0) is True
    assert loaded.version == 1

    stored = any_store.get("APP-TEST")
    assert stored.version == 1
    assert stored.status is ApplicationStatus.IDENTITY_VERIFIED


def test_compare_and_swap_rejects_stale_version(any_store, application):
    any_store.set(application)
    first = any_store.get("APP-TEST")
    second = any_store.get("APP-TEST")

    assert any_store.compare_and_swap(first, expected_version=0) is True
    second.status = ApplicationStatus.IDENTITY_VERIFICATION_FAILED
    assert any_store.compare_and_swap(second, expected_version=0) is False

    assert any_store.get("APP-TEST").status is ApplicationStatus.SUBMITTED
    assert any_store.get("APP-TEST").version == 1


def test_compare_and_swap_missing_record(any_store, application):
    assert any_store.compare_and_swap(application, expected_version=0) is False
    assert any_store.get("APP-TEST") is None


def test_keyed_lock_drops_key_after_release():
    locks = KeyedLock()

    with locks.hold("APP-1"):
        assert len(locks) == 1
        with locks.hold("APP-2"):
            assert len(locks) == 2
    assert len(locks) == 0

    with pytest.raises(RuntimeError):
        with locks.hold("APP-1"):
            raise RuntimeError("stage failed")
    assert len(locks) == 0


def test_keyed_lock_kept_while_waiters_remain():
    locks = KeyedLock()
    entered = threading.Event()
    order = []

    def waiter():
        entered.set()
        with locks.hold("APP-1"):
            order.append("waiter")

    with locks.hold("APP-1"):
        thread = threading.Thread(target=waiter)
        thread.start()
        entered.wait()
        order.append("holder")
    thread.join()

    assert order == ["holder", "waiter"]
    assert len(locks) == 0
