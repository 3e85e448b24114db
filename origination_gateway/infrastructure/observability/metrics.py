"""Prometheus metrics for monitoring the origination funnel, approvals and credit limits"""

from prometheus_client import Counter, Histogram

# Funnel metrics
stage_counter = Counter(
    "origination_stage_total",
    "Stage invocations by outcome",
    ["stage", "outcome"],  # outcome: success | <error_code>
)

stage_duration_histogram = Histogram(
    "origination_stage_duration_seconds",
    "Time spent executing a stage",
    ["stage"],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
)

identity_outcome_counter = Counter(
    "origination_identity_verification_total",
    "Identity verification verdicts",
    ["verdict"],  # passed | failed
)

# Decision metrics
decision_counter = Counter(
    "origination_decision_total",
    "Total underwriting decisions made",
    ["outcome", "overridden"],
)

credit_limit_bucket_counter = Counter(
    "origination_credit_limit_bucket",
    "Credit limits issued by bucket",
    ["bucket"],  # $0-$2.5k, $2.5k-$5k, $5k-$10k, $10k+
)

card_activation_counter = Counter(
    "origination_card_activation_total",
    "Cards activated by tier",
    ["tier"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_stage(stage: str, outcome: str, duration_seconds: float) -> None:
    stage_counter.labels(stage=stage, outcome=outcome).inc()
    stage_duration_histogram.labels(stage=stage).observe(duration_seconds)


def record_decision(outcome: str, overridden: bool, credit_limit: int | None) -> None:
    """Record decision metrics for monitoring approval rates and credit distribution"""
    decision_counter.labels(outcome=outcome, overridden=str(overridden).lower()).inc()
    if credit_limit is None:
        return

    # Bucket credit limits for distribution analysis
    if credit_limit < 2_500:
        bucket = "$0-$2.5k"
    elif credit_limit < 5_000:
        bucket = "$2.5k-$5k"
    elif credit_limit < 10_000:
        bucket = "$5k-$10k"
    else:
        bucket = "$10k+"

    credit_limit_bucket_counter.labels(bucket=bucket).inc()
