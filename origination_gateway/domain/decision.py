"""Underwriting decision: approve/deny, credit limit, APR and card tier"""

from datetime import datetime
from typing import List, Tuple
from origination_gateway.domain.models import (
    Application,
    ApplicationStatus,
    CardTerms,
    Decision,
)
from origination_gateway.domain.exceptions import InvalidApplicationError
from origination_gateway.domain.lifecycle import advance, require
from origination_gateway.utils.rounding import round_half_up

AUTO_APPROVE_MIN_RISK_SCORE = 40

INCOME_LIMIT_SHARE = 0.2
MAX_BASE_CREDIT_LIMIT = 50_000
CREDIT_LIMIT_INCREMENT = 500

APR_RISK_SURCHARGE = 2.0
APR_SURCHARGE_BELOW_RISK_SCORE = 70

GRACE_PERIOD_DAYS = 25
LATE_FEE = 39
FOREIGN_TRANSACTION_FEE = 3.0

GENERIC_DENIAL_REASON = "Does not meet underwriting criteria"

# (min credit score, multiplier), checked top-down
LIMIT_MULTIPLIER_BANDS: List[Tuple[int, float]] = [
    (800, 1.5),
    (740, 1.2),
    (670, 1.0),
    (580, 0.6),
]
LIMIT_MULTIPLIER_FLOOR = 0.4

APR_BANDS: List[Tuple[int, float]] = [
    (800, 14.99),
    (740, 17.99),
    (670, 21.99),
    (580, 25.99),
]
MAX_APR = 29.99


def determine_auto_decision(risk_score: int) -> str:
    """
    Automatic outcome from the risk score alone.

    The 40-59 band is recommended for manual review by the risk stage but is
    auto-approved here unless the caller overrides.
    """
    return "approved" if risk_score >= AUTO_APPROVE_MIN_RISK_SCORE else "denied"


def resolve_decision(auto_decision: str, override: str) -> Tuple[str, bool]:
    """
    Apply an approve/deny/auto override.

    Returns: (final_decision, overridden) where overridden is True only when
    the override changed the outcome.
    """
    if override == "auto":
        return auto_decision, False
    elif override == "approve":
        final = "approved"
    elif override == "deny":
        final = "denied"
    else:
        raise InvalidApplicationError(f"Unknown decision override '{override}'")
    return final, final != auto_decision


def _band_lookup(credit_score: int, bands: List[Tuple[int, float]], floor: float) -> float:
    for min_score, value in bands:
        if credit_score >= min_score:
            return value
    return floor


def round_to_increment(amount: float, increment: int = CREDIT_LIMIT_INCREMENT) -> int:
    """Round half-up to the nearest increment"""
    return int(round_half_up(amount / increment)) * increment


def calculate_credit_limit(annual_income: float, credit_score: int, risk_score: int) -> int:
    """
    Income-based limit scaled by credit band and risk score.

    min(20% of income, $50k) x credit-score multiplier x risk_score/100,
    rounded to the nearest $500.
    """
    base = min(annual_income * INCOME_LIMIT_SHARE, MAX_BASE_CREDIT_LIMIT)
    base *= _band_lookup(credit_score, LIMIT_MULTIPLIER_BANDS, LIMIT_MULTIPLIER_FLOOR)
    base *= risk_score / 100
    return round_to_increment(base)


def calculate_apr(credit_score: int, risk_score: int) -> float:
    apr = _band_lookup(credit_score, APR_BANDS, MAX_APR)
    if risk_score < APR_SURCHARGE_BELOW_RISK_SCORE:
        apr += APR_RISK_SURCHARGE
    return round_half_up(apr, 2)


def determine_card_tier(credit_score: int, credit_limit: int) -> Tuple[str, int, float]:
    """Returns: (card_tier, annual_fee, rewards_rate)"""
    if credit_score >= 740 and credit_limit >= 10_000:
        return "Premium", 95, 2.0
    elif credit_score >= 670 and credit_limit >= 5_000:
        return "Standard Plus", 0, 1.5
    return "Standard", 0, 1.0


def build_card_terms(annual_income: float, credit_score: int, risk_score: int) -> CardTerms:
    credit_limit = calculate_credit_limit(annual_income, credit_score, risk_score)
    card_tier, annual_fee, rewards_rate = determine_card_tier(credit_score, credit_limit)
    return CardTerms(
        credit_limit=credit_limit,
        apr=calculate_apr(credit_score, risk_score),
        card_tier=card_tier,
        annual_fee=annual_fee,
        rewards_rate=rewards_rate,
        grace_period=GRACE_PERIOD_DAYS,
        late_fee=LATE_FEE,
        foreign_transaction_fee=FOREIGN_TRANSACTION_FEE,
    )


def get_denial_reasons(application: Application) -> List[str]:
    """Ordered adverse-action reasons; never empty"""
    credit = application.credit_check
    risk = application.risk_assessment
    reasons = []

    if credit.credit_score < 580:
        reasons.append("Credit score below minimum threshold")
    if risk.risk_score < 40:
        reasons.append("High risk assessment score")
    if credit.history.delinquencies > 2:
        reasons.append("Multiple recent delinquencies")
    if credit.history.public_records > 0:
        reasons.append("Public records (bankruptcy, liens, etc.)")
    if risk.debt_to_income_ratio is None or risk.debt_to_income_ratio > 0.5:
        reasons.append("Debt-to-income ratio too high")
    if application.intake.employment.status == "unemployed":
        reasons.append("Insufficient income verification")

    if not reasons:
        reasons.append(GENERIC_DENIAL_REASON)
    return reasons


def make_decision(
    application: Application,
    now: datetime,
    override: str = "auto",
    manual_review_notes: str | None = None,
) -> Decision:
    """Decide a risk-assessed application and attach terms or denial reasons"""
    require(
        application,
        application.risk_assessed,
        "Risk assessment must be completed before making a decision",
    )
    require(
        application,
        application.decision is None,
        "A decision has already been made for this application",
    )

    risk_score = application.risk_assessment.risk_score
    auto_decision = determine_auto_decision(risk_score)
    final_decision, overridden = resolve_decision(auto_decision, override)

    if final_decision == "approved":
        decision = Decision(
            decision="approved",
            decided_at=now,
            auto_decision=auto_decision,
            overridden=overridden,
            manual_review_notes=manual_review_notes,
            card_terms=build_card_terms(
                application.intake.income.annual,
                application.credit_check.credit_score,
                risk_score,
            ),
        )
        advance(application, ApplicationStatus.APPROVED)
    else:
        decision = Decision(
            decision="denied",
            decided_at=now,
            auto_decision=auto_decision,
            overridden=overridden,
            manual_review_notes=manual_review_notes,
            denial_reasons=get_denial_reasons(application),
        )
        advance(application, ApplicationStatus.DENIED)

    application.decision = decision
    return decision
