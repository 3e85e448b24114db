"""Risk scoring engine - additive rule table over credit profile and applicant facts"""

from datetime import datetime
from typing import List, Tuple
from origination_gateway.domain.models import (
    Application,
    ApplicationStatus,
    CreditCheck,
    Employment,
    RiskAssessment,
    RiskFactor,
)
from origination_gateway.domain.lifecycle import advance, require
from origination_gateway.utils.rounding import round_half_up

BASE_SCORE = 100
MIN_SCORE = 0
MAX_SCORE = 100


def calculate_debt_to_income(total_balance: float, annual_income: float) -> float | None:
    """
    Outstanding balance relative to monthly income.

    Returns None when there is no income to divide by; callers treat that as
    an unbounded ratio.
    """
    monthly_income = annual_income / 12
    if monthly_income <= 0:
        return None
    return total_balance / monthly_income


def score_risk(
    credit_check: CreditCheck,
    annual_income: float,
    employment: Employment,
) -> Tuple[int, List[RiskFactor], float | None]:
    """
    Start at 100 and apply every matching adjustment.

    Each factor is a single if/elif chain so at most one row per factor
    applies. Delinquencies scale with their count. The result is clamped to
    [0, 100].

    Returns: (risk_score, applied_factors, debt_to_income_ratio)
    """
    score = BASE_SCORE
    factors: List[RiskFactor] = []

    def apply(factor: str, impact: int) -> None:
        nonlocal score
        score += impact
        factors.append(RiskFactor(factor=factor, impact=impact))

    # Credit score
    credit_score = credit_check.credit_score
    if credit_score < 580:
        apply("Poor credit score", -40)
    elif credit_score < 670:
        apply("Fair credit score", -25)
    elif credit_score < 740:
        apply("Good credit score", -10)
    elif credit_score >= 800:
        apply("Exceptional credit score", 5)

    # Debt-to-income
    dti = calculate_debt_to_income(credit_check.history.total_balance, annual_income)
    if dti is None or dti > 0.5:
        apply("High debt-to-income ratio", -20)
    elif dti > 0.35:
        apply("Moderate debt-to-income ratio", -10)

    # Utilization
    utilization = credit_check.utilization_rate
    if utilization > 70:
        apply("High credit utilization", -15)
    elif utilization > 50:
        apply("Moderate credit utilization", -8)

    # Employment stability
    years = employment.years_employed
    if employment.status == "unemployed":
        apply("Unemployed", -10)
    elif years is not None and years < 1:
        apply("Short employment history", -5)
    elif years is not None and years > 5:
        apply("Stable employment", 3)

    # Delinquencies
    delinquencies = credit_check.history.delinquencies
    if delinquencies > 0:
        apply(f"{delinquencies} delinquency/ies", -5 * delinquencies)

    # Public records
    if credit_check.history.public_records > 0:
        apply("Public records found", -5)

    score = max(MIN_SCORE, min(MAX_SCORE, score))
    return score, factors, dti


def categorize_risk(score: int) -> str:
    if score >= 80:
        return "Low Risk"
    elif score >= 60:
        return "Medium Risk"
    elif score >= 40:
        return "High Risk"
    return "Very High Risk"


def recommend(score: int) -> str:
    if score >= 60:
        return "Approve"
    elif score >= 40:
        return "Manual Review"
    return "Deny"


def assess_risk(application: Application, now: datetime) -> RiskAssessment:
    """Score a credit-checked application and attach the assessment"""
    require(
        application,
        application.credit_checked,
        "Credit check must be completed before risk assessment",
    )
    require(
        application,
        application.risk_assessment is None,
        "Risk assessment has already been completed for this application",
    )

    score, factors, dti = score_risk(
        application.credit_check,
        application.intake.income.annual,
        application.intake.employment,
    )
    assessment = RiskAssessment(
        risk_score=score,
        risk_category=categorize_risk(score),
        recommendation=recommend(score),
        risk_factors=factors,
        debt_to_income_ratio=round_half_up(dti, 2) if dti is not None else None,
        assessed_at=now,
    )

    advance(application, ApplicationStatus.RISK_ASSESSED)
    application.risk_assessment = assessment
    application.risk_assessed = True
    return assessment
