"""Unit tests for risk scoring logic"""

import pytest
from datetime import datetime, timezone
from origination_gateway.domain.models import CreditCheck, CreditHistory, Employment
from origination_gateway.domain.risk import (
    calculate_debt_to_income,
    categorize_risk,
    recommend,
    score_risk,
)


def make_credit_check(credit_score: int = 750, utilization_rate: float = 5.0, **history) -> CreditCheck:
    values = dict(
        accounts_open=5,
        accounts_closed=1,
        total_credit_limit=20_000,
        total_balance=1_000,
        oldest_account=10,
        average_account_age=5,
        hard_inquiries=0,
        delinquencies=0,
        public_records=0,
    )
    values.update(history)
    return CreditCheck(
        credit_score=credit_score,
        score_range="",
        bureaus=["experian"],
        checked_at=datetime.now(timezone.utc),
        history=CreditHistory(**values),
        utilization_rate=utilization_rate,
    )


EMPLOYED = Employment(status="employed", years_employed=3)


def test_clean_profile_keeps_full_score():
    """No rule fires for a 740-799 score with low DTI and utilization"""
    score, factors, dti = score_risk(make_credit_check(), 60_000, EMPLOYED)

    assert score == 100
    assert factors == []
    assert dti == pytest.approx(0.2)  # 1000 / 5000


@pytest.mark.parametrize(
    "credit_score,impact",
    [(500, -40), (579, -40), (580, -25), (669, -25), (670, -10), (739, -10), (800, 5), (850, 5)],
)
def test_credit_score_bands(credit_score, impact):
    score, factors, _ = score_risk(make_credit_check(credit_score=credit_score), 60_000, EMPLOYED)

    assert factors[0].impact == impact
    assert score == min(100, 100 + impact)


def test_credit_score_very_good_band_has_no_adjustment():
    _, factors, _ = score_risk(make_credit_check(credit_score=760), 60_000, EMPLOYED)
    assert factors == []


def test_debt_to_income_bands():
    # 2,000 / 5,000 = 0.4 -> moderate
    score, factors, _ = score_risk(make_credit_check(total_balance=2_000), 60_000, EMPLOYED)
    assert [(f.factor, f.impact) for f in factors] == [("Moderate debt-to-income ratio", -10)]
    assert score == 90

    # 3,000 / 5,000 = 0.6 -> high
    score, factors, _ = score_risk(make_credit_check(total_balance=3_000), 60_000, EMPLOYED)
    assert [(f.factor, f.impact) for f in factors] == [("High debt-to-income ratio", -20)]
    assert score == 80


def test_zero_income_counts_as_high_debt_to_income():
    score, factors, dti = score_risk(make_credit_check(), 0, EMPLOYED)

    assert dti is None
    assert ("High debt-to-income ratio", -20) in [(f.factor, f.impact) for f in factors]
    assert score == 80


def test_utilization_bands():
    _, factors, _ = score_risk(make_credit_check(utilization_rate=55.0), 60_000, EMPLOYED)
    assert [f.impact for f in factors] == [-8]

    _, factors, _ = score_risk(make_credit_check(utilization_rate=70.01), 60_000, EMPLOYED)
    assert [f.impact for f in factors] == [-15]


def test_employment_adjustments():
    unemployed = Employment(status="unemployed", years_employed=10)
    _, factors, _ = score_risk(make_credit_check(), 60_000, unemployed)
    assert [(f.factor, f.impact) for f in factors] == [("Unemployed", -10)]

    new_hire = Employment(status="employed", years_employed=0.5)
    _, factors, _ = score_risk(make_credit_check(), 60_000, new_hire)
    assert [(f.factor, f.impact) for f in factors] == [("Short employment history", -5)]

    veteran = Employment(status="employed", years_employed=8)
    score, factors, _ = score_risk(make_credit_check(credit_score=700), 60_000, veteran)
    assert ("Stable employment", 3) in [(f.factor, f.impact) for f in factors]
    assert score == 93  # 100 - 10 + 3

    unknown_tenure = Employment(status="retired")
    _, factors, _ = score_risk(make_credit_check(), 60_000, unknown_tenure)
    assert factors == []


def test_delinquencies_scale_with_count_and_public_records_flat():
    score, factors, _ = score_risk(make_credit_check(delinquencies=3, public_records=2), 60_000, EMPLOYED)

    assert [(f.factor, f.impact) for f in factors] == [
        ("3 delinquency/ies", -15),
        ("Public records found", -5),
    ]
    assert score == 80


def test_score_clamped_at_zero():
    """Many negative factors cannot push the score below 0"""
    worst = make_credit_check(
        credit_score=400,
        utilization_rate=95.0,
        total_balance=49_000,
        delinquencies=20,
        public_records=1,
    )
    score, factors, _ = score_risk(worst, 12_000, Employment(status="unemployed"))

    assert score == 0
    assert sum(f.impact for f in factors) < -100


def test_score_clamped_at_hundred():
    veteran = Employment(status="employed", years_employed=10)
    score, factors, _ = score_risk(make_credit_check(credit_score=820), 60_000, veteran)

    assert [f.impact for f in factors] == [5, 3]
    assert score == 100


def test_calculate_debt_to_income():
    assert calculate_debt_to_income(5_000, 120_000) == pytest.approx(0.5)
    assert calculate_debt_to_income(5_000, 0) is None


def test_category_and_recommendation_bands():
    assert [categorize_risk(s) for s in (100, 80, 79, 60, 59, 40, 39, 0)] == [
        "Low Risk",
        "Low Risk",
        "Medium Risk",
        "Medium Risk",
        "High Risk",
        "High Risk",
        "Very High Risk",
        "Very High Risk",
    ]
    assert [recommend(s) for s in (60, 59, 40, 39)] == ["Approve", "Manual Review", "Manual Review", "Deny"]
