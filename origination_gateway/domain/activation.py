"""Card activation: card number issuance, account opening"""

from datetime import datetime
from origination_gateway.domain.models import (
    AccountDetails,
    Address,
    Application,
    ApplicationStatus,
    CardDetails,
)
from origination_gateway.domain.exceptions import AlreadyActivatedError, InvalidApplicationError
from origination_gateway.domain.lifecycle import advance, require
from origination_gateway.domain.randomness import RandomSource
from origination_gateway.utils.date_utils import add_years

CARD_BODY_DIGITS = 14
ACCOUNT_SUFFIX_LENGTH = 6


def luhn_check_digit(partial_number: str) -> int:
    """Check digit that makes partial_number + digit pass the Luhn checksum"""
    total = 0
    # Rightmost digit of the partial number is doubled once the check digit is appended
    for position, char in enumerate(reversed(partial_number)):
        digit = int(char)
        if position % 2 == 0:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return (10 - total % 10) % 10


def is_luhn_valid(card_number: str) -> bool:
    if not card_number.isdigit() or len(card_number) < 2:
        return False
    return luhn_check_digit(card_number[:-1]) == int(card_number[-1])


def generate_card_number(random_source: RandomSource, issuer_prefix: str = "4") -> str:
    """Issuer prefix + 14 random digits + Luhn check digit"""
    partial = issuer_prefix + random_source.digits(CARD_BODY_DIGITS)
    return partial + str(luhn_check_digit(partial))


def mask_card_number(card_number: str) -> str:
    """Show only last 4 digits"""
    return f"****-****-****-{card_number[-4:]}"


def validate_pin(pin: str) -> str:
    if len(pin) != 4 or not pin.isdigit():
        raise InvalidApplicationError("PIN must be exactly 4 digits")
    return pin


def activate_card(
    application: Application,
    random_source: RandomSource,
    now: datetime,
    delivery_address: Address | None = None,
    requested_pin: str | None = None,
    issuer_prefix: str = "4",
    validity_years: int = 5,
) -> tuple[CardDetails, AccountDetails]:
    """
    Issue the card and open the account for an approved application.

    Terms are copied from the stored decision as-is; nothing is recomputed.
    """
    if application.card_activated:
        raise AlreadyActivatedError(
            application.application_id,
            application.card_details.masked_card_number,
            current_status=application.status.value,
        )
    require(
        application,
        application.status == ApplicationStatus.APPROVED,
        f"Cannot activate card. Application status is '{application.status.value}'",
    )

    pin = validate_pin(requested_pin) if requested_pin is not None else str(random_source.integer(1000, 9999))
    terms = application.decision.card_terms
    card_number = generate_card_number(random_source, issuer_prefix)
    expires = add_years(now.date(), validity_years)

    card = CardDetails(
        card_number=card_number,
        masked_card_number=mask_card_number(card_number),
        cvv=str(random_source.integer(100, 999)),
        expiration_month=f"{expires.month:02d}",
        expiration_year=f"{expires.year % 100:02d}",
        pin=pin,
        cardholder_name=application.applicant_name.upper(),
        card_tier=terms.card_tier,
        delivery_address=delivery_address or application.intake.address,
        activated_at=now,
    )

    account_number = f"CC{int(now.timestamp() * 1000)}{random_source.alphanumeric(ACCOUNT_SUFFIX_LENGTH)}"
    account = AccountDetails(
        account_number=account_number,
        credit_limit=terms.credit_limit,
        available_credit=terms.credit_limit,
        current_balance=0,
        statement_balance=0,
        minimum_payment_due=0,
        payment_due_date=None,
        apr=terms.apr,
        rewards_balance=0,
    )

    advance(application, ApplicationStatus.ACTIVE)
    application.card_details = card
    application.account_details = account
    application.card_activated = True
    return card, account
