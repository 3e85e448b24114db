"""Domain models - pure Python dataclasses representing the origination aggregate"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Literal


class ApplicationStatus(str, Enum):
    """Current state of an application in the origination workflow"""

    SUBMITTED = "submitted"
    IDENTITY_VERIFIED = "identity_verified"
    IDENTITY_VERIFICATION_FAILED = "identity_verification_failed"
    CREDIT_CHECKED = "credit_checked"
    RISK_ASSESSED = "risk_assessed"
    APPROVED = "approved"
    DENIED = "denied"
    ACTIVE = "active"


EmploymentStatus = Literal["employed", "self-employed", "unemployed", "retired"]
IncomeSource = Literal["salary", "business", "investments", "retirement", "other"]
HousingStatus = Literal["own", "rent", "other"]
GovernmentIdType = Literal["drivers_license", "passport", "state_id"]
VerificationMethod = Literal["automatic", "manual", "document_upload"]
Bureau = Literal["experian", "equifax", "transunion"]
DecisionOutcome = Literal["approved", "denied"]
DecisionOverride = Literal["approve", "deny", "auto"]

ALL_BUREAUS: List[str] = ["experian", "equifax", "transunion"]


@dataclass
class Address:
    street: str
    city: str
    state: str
    zip_code: str


@dataclass
class Employment:
    status: EmploymentStatus
    employer: str | None = None
    job_title: str | None = None
    years_employed: float | None = None


@dataclass
class Income:
    annual: float  # dollars
    source: IncomeSource


@dataclass
class Housing:
    status: HousingStatus
    monthly_payment: float


@dataclass
class ApplicationIntake:
    """Applicant facts captured at submission; never modified afterwards"""

    first_name: str
    last_name: str
    email: str
    phone: str
    date_of_birth: str  # YYYY-MM-DD
    ssn_last4: str
    address: Address
    employment: Employment
    income: Income
    housing: Housing


@dataclass
class VerificationChecks:
    document_authenticity: bool
    face_match: bool
    ssn_match: bool
    address_verification: bool


@dataclass
class IdentityVerification:
    """Outcome of identity verification, kept even when the applicant fails"""

    verified: bool
    verification_score: float  # 0-100
    government_id_type: GovernmentIdType
    verification_method: VerificationMethod
    verified_at: datetime
    checks: VerificationChecks


@dataclass
class CreditHistory:
    accounts_open: int
    accounts_closed: int
    total_credit_limit: int
    total_balance: int
    oldest_account: int  # years
    average_account_age: int  # years
    hard_inquiries: int
    delinquencies: int
    public_records: int


@dataclass
class CreditCheck:
    credit_score: int  # FICO range 300-850
    score_range: str
    bureaus: List[str]
    checked_at: datetime
    history: CreditHistory
    utilization_rate: float  # percent, 2 dp
    risk_factors: List[str] = field(default_factory=list)


@dataclass
class RiskFactor:
    """Single scoring adjustment applied during risk assessment"""

    factor: str
    impact: int


@dataclass
class RiskAssessment:
    risk_score: int  # clamped 0-100
    risk_category: str
    recommendation: str
    risk_factors: List[RiskFactor]
    debt_to_income_ratio: float | None  # None when annual income is zero
    assessed_at: datetime


@dataclass
class CardTerms:
    credit_limit: int
    apr: float
    card_tier: str
    annual_fee: int
    rewards_rate: float
    grace_period: int  # days
    late_fee: int
    foreign_transaction_fee: float  # percent


@dataclass
class Decision:
    """Final underwriting outcome; exactly one of card_terms / denial_reasons is set"""

    decision: DecisionOutcome
    decided_at: datetime
    auto_decision: DecisionOutcome
    overridden: bool
    manual_review_notes: str | None = None
    card_terms: CardTerms | None = None
    denial_reasons: List[str] | None = None


@dataclass
class CardDetails:
    """Issued card. card_number, cvv and pin are sensitive and never surfaced."""

    card_number: str
    masked_card_number: str
    cvv: str
    expiration_month: str
    expiration_year: str
    pin: str
    cardholder_name: str
    card_tier: str
    delivery_address: Address
    activated_at: datetime
    status: str = "active"

    @property
    def expiration_date(self) -> str:
        return f"{self.expiration_month}/{self.expiration_year}"


@dataclass
class AccountDetails:
    account_number: str
    credit_limit: int
    available_credit: int
    current_balance: int
    statement_balance: int
    minimum_payment_due: int
    payment_due_date: str | None
    apr: float
    rewards_balance: int


@dataclass
class Application:
    """Aggregate root: intake plus every artifact produced by the stages so far"""

    application_id: str
    intake: ApplicationIntake
    submitted_at: datetime
    status: ApplicationStatus = ApplicationStatus.SUBMITTED
    identity_verified: bool = False
    credit_checked: bool = False
    risk_assessed: bool = False
    card_activated: bool = False
    identity_verification: IdentityVerification | None = None
    credit_check: CreditCheck | None = None
    risk_assessment: RiskAssessment | None = None
    decision: Decision | None = None
    card_details: CardDetails | None = None
    account_details: AccountDetails | None = None
    version: int = 0

    @property
    def applicant_name(self) -> str:
        return f"{self.intake.first_name} {self.intake.last_name}"
