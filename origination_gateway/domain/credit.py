"""Credit check stage: bureau pull summary, utilization and score banding"""

from datetime import datetime
from typing import List
from origination_gateway.domain.models import (
    Application,
    ApplicationStatus,
    CreditCheck,
    CreditHistory,
)
from origination_gateway.domain.lifecycle import advance, require
from origination_gateway.utils.rounding import round_half_up


def get_credit_score_range(score: int) -> str:
    """Map a credit score to its FICO label"""
    if score >= 800:
        return "Exceptional"
    elif score >= 740:
        return "Very Good"
    elif score >= 670:
        return "Good"
    elif score >= 580:
        return "Fair"
    return "Poor"


def calculate_utilization(history: CreditHistory) -> float:
    """Revolving utilization as a percentage, 2 dp"""
    if history.total_credit_limit <= 0:
        return 0.0
    return round_half_up(history.total_balance / history.total_credit_limit * 100, 2)


def identify_risk_factors(credit_score: int, utilization_rate: float, history: CreditHistory) -> List[str]:
    """Free-text flags surfaced to underwriters, in fixed order"""
    factors = []
    if credit_score < 600:
        factors.append("Low credit score")
    if utilization_rate > 70:
        factors.append("High credit utilization")
    if history.delinquencies > 0:
        factors.append("Recent delinquencies")
    if history.hard_inquiries > 3:
        factors.append("Multiple recent inquiries")
    if history.public_records > 0:
        factors.append("Public records found")
    if history.average_account_age < 2:
        factors.append("Limited credit history")
    return factors


def check_credit(
    application: Application,
    credit_score: int,
    history: CreditHistory,
    bureaus: List[str],
    now: datetime,
) -> CreditCheck:
    """Attach a credit profile to an identity-verified application"""
    require(
        application,
        application.identity_verified,
        "Identity must be verified before running credit check",
    )
    require(
        application,
        application.credit_check is None,
        "Credit check has already been completed for this application",
    )

    utilization_rate = calculate_utilization(history)
    credit_check = CreditCheck(
        credit_score=credit_score,
        score_range=get_credit_score_range(credit_score),
        bureaus=list(bureaus),
        checked_at=now,
        history=history,
        utilization_rate=utilization_rate,
        risk_factors=identify_risk_factors(credit_score, utilization_rate, history),
    )

    advance(application, ApplicationStatus.CREDIT_CHECKED)
    application.credit_check = credit_check
    application.credit_checked = True
    return credit_check
