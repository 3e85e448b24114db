"""SQLAlchemy-backed application store with optimistic versioning"""

from sqlalchemy import update
from sqlalchemy.orm import sessionmaker
from origination_gateway.domain.models import Application
from origination_gateway.infrastructure.database.models import CardApplicationRecord
from origination_gateway.infrastructure.store.base import ApplicationStore, from_payload, to_payload


class SqlApplicationStore(ApplicationStore):
    """
    Persists each application as a JSON payload plus status/version columns.

    The in-process keyed lock serializes writers inside one worker; the
    version column makes compare_and_swap safe across workers.
    """

    def __init__(self, session_factory: sessionmaker):
        super().__init__()
        self.session_factory = session_factory

    def get(self, application_id: str) -> Application | None:
        with self.session_factory() as db:
            record = db.get(CardApplicationRecord, application_id)
            if record is None:
                return None
            return from_payload(record.payload)

    def set(self, application: Application) -> None:
        with self.session_factory() as db:
            db.merge(
                CardApplicationRecord(
                    id=application.application_id,
                    status=application.status.value,
                    version=application.version,
                    payload=to_payload(application),
                )
            )
            db.commit()

    def compare_and_swap(self, application: Application, expected_version: int) -> bool:
        new_version = expected_version + 1
        application.version = new_version
        with self.session_factory() as db:
            result = db.execute(
                update(CardApplicationRecord)
                .where(CardApplicationRecord.id == application.application_id)
                .where(CardApplicationRecord.version == expected_version)
                .values(
                    status=application.status.value,
                    version=new_version,
                    payload=to_payload(application),
                )
            )
            if result.rowcount != 1:
                db.rollback()
                application.version = expected_version
                return False
            db.commit()
            return True
