"""Origination workflow service - stage operations over the application store"""

import logging
import math
import time
import uuid
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Callable, Dict, List, Mapping, TypeVar, get_args
from pydantic import TypeAdapter, ValidationError

from origination_gateway.domain import activation, credit, decision, identity, risk
from origination_gateway.domain.exceptions import (
    AlreadyActivatedError,
    ApplicationNotFoundError,
    ConcurrentModificationError,
    DomainException,
    InvalidApplicationError,
)
from origination_gateway.domain.lifecycle import next_step
from origination_gateway.domain.models import (
    ALL_BUREAUS,
    Address,
    Application,
    ApplicationIntake,
    Bureau,
    DecisionOverride,
    GovernmentIdType,
    VerificationMethod,
)
from origination_gateway.domain.randomness import RandomSource, SystemRandomSource
from origination_gateway.infrastructure.observability.logging import log_stage
from origination_gateway.infrastructure.observability.metrics import (
    card_activation_counter,
    identity_outcome_counter,
    record_decision,
    record_stage,
)
from origination_gateway.infrastructure.store.base import ApplicationStore
from origination_gateway.utils.case import dict_keys_to_camel
from origination_gateway.utils.rounding import round_half_up

logger = logging.getLogger(__name__)

Envelope = Dict[str, Any]
T = TypeVar("T")

ESTIMATED_DELIVERY = "5-7 business days"


@lru_cache(maxsize=None)
def _adapter(cls: type) -> TypeAdapter:
    return TypeAdapter(cls)


def dump(obj: Any) -> Any:
    """JSON-safe snake_case rendering of a domain dataclass"""
    return _adapter(type(obj)).dump_python(obj, mode="json")


def _require_choice(value: str, allowed: tuple, field_name: str) -> str:
    if value not in allowed:
        raise InvalidApplicationError(f"Invalid {field_name} '{value}'. Expected one of: {', '.join(allowed)}")
    return value


def validate_intake(intake: ApplicationIntake | Mapping[str, Any]) -> ApplicationIntake:
    """Coerce raw intake into the domain record and apply business sanity checks"""
    try:
        intake = _adapter(ApplicationIntake).validate_python(intake)
    except ValidationError as e:
        raise InvalidApplicationError(f"Invalid application: {e.error_count()} validation error(s)") from e

    if not math.isfinite(intake.income.annual) or not math.isfinite(intake.housing.monthly_payment):
        raise InvalidApplicationError("Income and housing payment must be finite numbers")
    if intake.employment.years_employed is not None and not math.isfinite(intake.employment.years_employed):
        raise InvalidApplicationError("Years employed must be a finite number")
    if intake.income.annual < 0:
        raise InvalidApplicationError("Annual income cannot be negative")
    if intake.housing.monthly_payment < 0:
        raise InvalidApplicationError("Monthly housing payment cannot be negative")
    if len(intake.ssn_last4) != 4 or not intake.ssn_last4.isdigit():
        raise InvalidApplicationError("SSN must be the last 4 digits")
    if intake.employment.years_employed is not None and intake.employment.years_employed < 0:
        raise InvalidApplicationError("Years employed cannot be negative")
    return intake


def generate_application_id() -> str:
    return f"APP-{uuid.uuid4().hex.upper()}"


class OriginationService:
    """
    Exposes each workflow stage as an operation returning a JSON envelope.

    Every operation returns {"success": bool, ...} with camelCase keys and
    never raises: domain errors become failure envelopes carrying
    errorCode, applicationId and currentStatus when known.
    """

    def __init__(
        self,
        store: ApplicationStore,
        random_source: RandomSource | None = None,
        clock: Callable[[], datetime] | None = None,
        card_issuer_prefix: str = "4",
        card_validity_years: int = 5,
    ):
        self.store = store
        self.random_source = random_source or SystemRandomSource()
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.card_issuer_prefix = card_issuer_prefix
        self.card_validity_years = card_validity_years

    # ------------------------------------------------------------------
    # Stage operations
    # ------------------------------------------------------------------

    def submit_application(self, intake: ApplicationIntake | Mapping[str, Any]) -> Envelope:
        """Stage 0: validate intake and create the record"""

        def action() -> Envelope:
            application = Application(
                application_id=generate_application_id(),
                intake=validate_intake(intake),
                submitted_at=self.clock(),
            )
            self.store.set(application)
            return {
                "application_id": application.application_id,
                "status": application.status.value,
                "message": "Application submitted successfully. Next step: Identity verification.",
                "submitted_at": application.submitted_at.isoformat(),
            }

        return self._execute("submit", None, action)

    def verify_identity(
        self,
        application_id: str,
        government_id_type: GovernmentIdType,
        government_id_number: str,
        verification_method: VerificationMethod,
    ) -> Envelope:
        def action() -> Envelope:
            _require_choice(government_id_type, get_args(GovernmentIdType), "government ID type")
            _require_choice(verification_method, get_args(VerificationMethod), "verification method")
            if not government_id_number:
                raise InvalidApplicationError("Government ID number is required")

            def mutate(application: Application):
                return identity.verify_identity(
                    application,
                    government_id_type=government_id_type,
                    verification_method=verification_method,
                    score=self.random_source.verification_score(),
                    now=self.clock(),
                )

            application, verification = self._mutate(application_id, mutate)
            identity_outcome_counter.labels(verdict="passed" if verification.verified else "failed").inc()
            return {
                "application_id": application_id,
                "verified": verification.verified,
                "verification_score": int(round_half_up(verification.verification_score)),
                "status": application.status.value,
                "message": (
                    "Identity verified successfully. Next step: Credit check."
                    if verification.verified
                    else "Identity verification failed. Application cannot proceed."
                ),
                "checks": dump(verification.checks),
            }

        return self._execute("identity_verification", application_id, action)

    def check_credit(self, application_id: str, bureaus: List[Bureau] | None = None) -> Envelope:
        def action() -> Envelope:
            selected = list(bureaus) if bureaus else list(ALL_BUREAUS)
            for bureau in selected:
                _require_choice(bureau, get_args(Bureau), "bureau")

            def mutate(application: Application):
                return credit.check_credit(
                    application,
                    credit_score=self.random_source.credit_score(),
                    history=self.random_source.credit_history(),
                    bureaus=selected,
                    now=self.clock(),
                )

            application, credit_check = self._mutate(application_id, mutate)
            return {
                "application_id": application_id,
                "credit_score": credit_check.credit_score,
                "score_range": credit_check.score_range,
                "utilization_rate": credit_check.utilization_rate,
                "credit_history": dump(credit_check.history),
                "risk_factors": list(credit_check.risk_factors),
                "status": application.status.value,
                "message": "Credit check completed successfully. Next step: Risk assessment.",
            }

        return self._execute("credit_check", application_id, action)

    def assess_risk(self, application_id: str) -> Envelope:
        def action() -> Envelope:
            application, assessment = self._mutate(
                application_id, lambda application: risk.assess_risk(application, now=self.clock())
            )
            return {
                "application_id": application_id,
                "risk_score": assessment.risk_score,
                "risk_category": assessment.risk_category,
                "recommendation": assessment.recommendation,
                "risk_factors": [dump(factor) for factor in assessment.risk_factors],
                "debt_to_income_ratio": assessment.debt_to_income_ratio,
                "status": application.status.value,
                "message": "Risk assessment completed successfully. Next step: Make decision.",
            }

        return self._execute("risk_assessment", application_id, action)

    def make_decision(
        self,
        application_id: str,
        override_decision: DecisionOverride = "auto",
        manual_review_notes: str | None = None,
    ) -> Envelope:
        def action() -> Envelope:
            _require_choice(override_decision, get_args(DecisionOverride), "decision override")
            application, outcome = self._mutate(
                application_id,
                lambda application: decision.make_decision(
                    application,
                    now=self.clock(),
                    override=override_decision,
                    manual_review_notes=manual_review_notes,
                ),
            )
            credit_limit = outcome.card_terms.credit_limit if outcome.card_terms else None
            record_decision(outcome.decision, outcome.overridden, credit_limit)

            response = {
                "application_id": application_id,
                "decision": outcome.decision,
                "auto_decision": outcome.auto_decision,
                "overridden": outcome.overridden,
                "status": application.status.value,
            }
            if outcome.decision == "approved":
                response["card_terms"] = dump(outcome.card_terms)
                response["message"] = "Application approved! Card terms have been determined. Next step: Card activation."
            else:
                response["denial_reasons"] = list(outcome.denial_reasons)
                response["message"] = "Application denied based on risk assessment and credit evaluation."
            return response

        return self._execute("decision", application_id, action)

    def activate_card(
        self,
        application_id: str,
        card_delivery_address: Address | Mapping[str, Any] | None = None,
        requested_pin: str | None = None,
    ) -> Envelope:
        def action() -> Envelope:
            delivery_address = None
            if card_delivery_address is not None:
                try:
                    delivery_address = _adapter(Address).validate_python(card_delivery_address)
                except ValidationError as e:
                    raise InvalidApplicationError("Invalid card delivery address") from e

            application, (card, account) = self._mutate(
                application_id,
                lambda application: activation.activate_card(
                    application,
                    self.random_source,
                    now=self.clock(),
                    delivery_address=delivery_address,
                    requested_pin=requested_pin,
                    issuer_prefix=self.card_issuer_prefix,
                    validity_years=self.card_validity_years,
                ),
            )
            card_activation_counter.labels(tier=card.card_tier).inc()
            return {
                "application_id": application_id,
                "status": application.status.value,
                "account_number": account.account_number,
                "card_details": {
                    "masked_card_number": card.masked_card_number,
                    "cardholder_name": card.cardholder_name,
                    "expiration_date": card.expiration_date,
                    "card_tier": card.card_tier,
                    "status": card.status,
                },
                "account_details": {
                    "credit_limit": account.credit_limit,
                    "available_credit": account.available_credit,
                    "apr": account.apr,
                },
                "delivery_info": {
                    "address": dump(card.delivery_address),
                    "estimated_delivery": ESTIMATED_DELIVERY,
                },
                "message": "Card activated successfully! Card will be delivered to the specified address.",
                "security_note": "Full card details (including CVV and PIN) have been securely stored and will be sent separately.",
            }

        return self._execute("activation", application_id, action)

    def get_application_status(self, application_id: str, include_full_details: bool = False) -> Envelope:
        """Read-only projection over the accumulated record"""

        def action() -> Envelope:
            application = self._load(application_id)
            summary = build_status_summary(application)
            if include_full_details:
                summary.update(build_full_details(application))
            return summary

        return self._execute("status", application_id, action, log=False)

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    def _load(self, application_id: str) -> Application:
        application = self.store.get(application_id)
        if application is None:
            raise ApplicationNotFoundError(application_id)
        return application

    def _mutate(self, application_id: str, fn: Callable[[Application], T]) -> tuple[Application, T]:
        """
        Run one stage against the stored record under the per-key lock.

        fn mutates a freshly loaded copy; the copy is only persisted through a
        version-checked compare_and_swap, so a stage that raises leaves the
        stored record untouched.
        """
        with self.store.lock(application_id):
            application = self._load(application_id)
            expected_version = application.version
            stored_status = application.status.value
            result = fn(application)
            if not self.store.compare_and_swap(application, expected_version):
                raise ConcurrentModificationError(
                    "Application was modified concurrently; reload and retry the next stage",
                    application_id=application_id,
                    current_status=stored_status,
                )
        return application, result

    def _execute(
        self,
        stage: str,
        application_id: str | None,
        action: Callable[[], Envelope],
        log: bool = True,
    ) -> Envelope:
        """Stage boundary: time the action, convert errors and record the outcome"""
        start_time = time.time()
        try:
            payload = action()
        except DomainException as e:
            duration = time.time() - start_time
            record_stage(stage, e.error_code, duration)
            logger.warning(
                f"{stage} rejected: {e.message}",
                extra={"application_id": application_id, "step": stage, "error_code": e.error_code},
            )
            return failure_envelope(e, application_id)
        except Exception:
            duration = time.time() - start_time
            record_stage(stage, "internal_error", duration)
            logger.exception(
                f"Unexpected error during {stage}",
                extra={"application_id": application_id, "step": stage},
            )
            return dict_keys_to_camel(
                {
                    "success": False,
                    "error": "Internal error",
                    "error_code": "internal_error",
                    "application_id": application_id,
                }
            )

        duration = time.time() - start_time
        record_stage(stage, "success", duration)
        if log:
            log_stage(
                payload.get("application_id", application_id),
                stage,
                "success",
                payload.get("status"),
                duration * 1000,
            )
        return dict_keys_to_camel({"success": True, **payload})


def failure_envelope(error: DomainException, application_id: str | None) -> Envelope:
    envelope: Dict[str, Any] = {
        "success": False,
        "error": error.message,
        "error_code": error.error_code,
        "application_id": error.application_id or application_id,
    }
    if error.current_status is not None:
        envelope["current_status"] = error.current_status
    if isinstance(error, AlreadyActivatedError):
        envelope["masked_card_number"] = error.masked_card_number
    return dict_keys_to_camel(envelope)


def build_status_summary(application: Application) -> Dict[str, Any]:
    summary: Dict[str, Any] = {
        "application_id": application.application_id,
        "applicant_name": application.applicant_name,
        "status": application.status.value,
        "submitted_at": application.submitted_at.isoformat(),
        "progress": {
            "submitted": True,
            "identity_verified": application.identity_verified,
            "credit_checked": application.credit_checked,
            "risk_assessed": application.risk_assessed,
            "decision_made": application.decision is not None,
            "card_activated": application.card_activated,
        },
        "next_step": next_step(application),
    }

    if application.decision is not None:
        summary["decision"] = {
            "decision": application.decision.decision,
            "decided_at": application.decision.decided_at.isoformat(),
        }
        if application.decision.decision == "approved":
            summary["card_terms"] = dump(application.decision.card_terms)
        else:
            summary["denial_reasons"] = list(application.decision.denial_reasons)

    if application.card_activated and application.card_details is not None:
        card = application.card_details
        account = application.account_details
        summary["card_details"] = {
            "masked_card_number": card.masked_card_number,
            "cardholder_name": card.cardholder_name,
            "expiration_date": card.expiration_date,
            "card_tier": card.card_tier,
            "status": card.status,
        }
        summary["account_details"] = {
            "account_number": account.account_number,
            "credit_limit": account.credit_limit,
            "available_credit": account.available_credit,
            "current_balance": account.current_balance,
            "apr": account.apr,
        }

    return summary


def build_full_details(application: Application) -> Dict[str, Any]:
    intake = application.intake
    details: Dict[str, Any] = {
        "applicant_details": {
            "first_name": intake.first_name,
            "last_name": intake.last_name,
            "email": intake.email,
            "phone": intake.phone,
            "date_of_birth": intake.date_of_birth,
            "address": dump(intake.address),
        },
        "employment": dump(intake.employment),
        "income": dump(intake.income),
        "housing": dump(intake.housing),
    }

    verification = application.identity_verification
    if verification is not None:
        details["identity_verification"] = {
            "verified": verification.verified,
            "verification_score": verification.verification_score,
            "verified_at": verification.verified_at.isoformat(),
            "checks": dump(verification.checks),
        }

    credit_check = application.credit_check
    if credit_check is not None:
        details["credit_check"] = {
            "credit_score": credit_check.credit_score,
            "score_range": credit_check.score_range,
            "utilization_rate": credit_check.utilization_rate,
            "risk_factors": list(credit_check.risk_factors),
            "checked_at": credit_check.checked_at.isoformat(),
        }

    assessment = application.risk_assessment
    if assessment is not None:
        details["risk_assessment"] = {
            "risk_score": assessment.risk_score,
            "risk_category": assessment.risk_category,
            "recommendation": assessment.recommendation,
            "debt_to_income_ratio": assessment.debt_to_income_ratio,
            "assessed_at": assessment.assessed_at.isoformat(),
        }

    return details

