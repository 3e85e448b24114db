"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timezone
from typing import Any, Dict
from fastapi.testclient import TestClient
from origination_gateway.api.main import create_app
from origination_gateway.api.dependencies import get_origination_service
from origination_gateway.domain.models import CreditHistory
from origination_gateway.domain.randomness import RandomSource
from origination_gateway.infrastructure.database.session import create_db_engine, create_session_factory, init_db
from origination_gateway.infrastructure.store.memory import InMemoryApplicationStore
from origination_gateway.infrastructure.store.sql import SqlApplicationStore
from origination_gateway.services.origination import OriginationService

FIXED_NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


def make_history(**overrides: Any) -> CreditHistory:
    """Clean bureau file: 5% utilization, no delinquencies or public records"""
    values = dict(
        accounts_open=6,
        accounts_closed=2,
        total_credit_limit=20_000,
        total_balance=1_000,
        oldest_account=12,
        average_account_age=5,
        hard_inquiries=1,
        delinquencies=0,
        public_records=0,
    )
    values.update(overrides)
    return CreditHistory(**values)


class ScriptedRandomSource(RandomSource):
    """Deterministic RandomSource; tweak attributes per test"""

    def __init__(self):
        self.score = 85.0
        self.fico = 750
        self.history = make_history()
        self.card_digits = "12345678901234"

    def verification_score(self) -> float:
        return self.score

    def credit_score(self) -> int:
        return self.fico

    def credit_history(self) -> CreditHistory:
        return self.history

    def digits(self, count: int) -> str:
        return (self.card_digits * count)[:count]

    def integer(self, low: int, high: int) -> int:
        return low

    def alphanumeric(self, count: int) -> str:
        return ("ABC123" * count)[:count]


@pytest.fixture
def random_source() -> ScriptedRandomSource:
    return ScriptedRandomSource()


@pytest.fixture
def store() -> InMemoryApplicationStore:
    return InMemoryApplicationStore()


@pytest.fixture
def sql_store() -> SqlApplicationStore:
    """SQLite in-memory store shared across connections"""
    engine = create_db_engine("sqlite://")
    init_db(engine)
    return SqlApplicationStore(create_session_factory(engine))


@pytest.fixture
def service(store: InMemoryApplicationStore, random_source: ScriptedRandomSource) -> OriginationService:
    return OriginationService(store, random_source=random_source, clock=lambda: FIXED_NOW)


@pytest.fixture
def intake() -> Dict[str, Any]:
    """Salaried applicant earning $60k with 3 years at the current employer"""
    return {
        "first_name": "Jane",
        "last_name": "Doe",
        "email": "jane.doe@example.com",
        "phone": "555-0100",
        "date_of_birth": "1990-04-12",
        "ssn_last4": "6789",
        "address": {"street": "1 Main St", "city": "Austin", "state": "TX", "zip_code": "78701"},
        "employment": {"status": "employed", "employer": "Acme", "job_title": "Engineer", "years_employed": 3},
        "income": {"annual": 60_000, "source": "salary"},
        "housing": {"status": "rent", "monthly_payment": 1_500},
    }


@pytest.fixture
def submitted_id(service: OriginationService, intake: Dict[str, Any]) -> str:
    return service.submit_application(intake)["applicationId"]


@pytest.fixture
def approved_id(service: OriginationService, submitted_id: str) -> str:
    """Application walked through every stage up to an approved decision"""
    service.verify_identity(submitted_id, "drivers_license", "D1234567", "automatic")
    service.check_credit(submitted_id)
    service.assess_risk(submitted_id)
    service.make_decision(submitted_id)
    return submitted_id


@pytest.fixture
def client(service: OriginationService) -> TestClient:
    """Create FastAPI test client wired to the test service"""
    app = create_app()
    app.dependency_overrides[get_origination_service] = lambda: service
    return TestClient(app)
