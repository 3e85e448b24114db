"""Unit tests for card number generation and Luhn checksum"""

import pytest
from datetime import date
from origination_gateway.domain.activation import (
    generate_card_number,
    is_luhn_valid,
    luhn_check_digit,
    mask_card_number,
    validate_pin,
)
from origination_gateway.domain.exceptions import InvalidApplicationError
from origination_gateway.domain.randomness import SystemRandomSource
from origination_gateway.utils.date_utils import add_years


def test_luhn_check_digit_known_vectors():
    assert luhn_check_digit("7992739871") == 3
    assert luhn_check_digit("411111111111111") == 1


def test_is_luhn_valid():
    assert is_luhn_valid("4111111111111111")
    assert is_luhn_valid("79927398713")
    assert not is_luhn_valid("4111111111111112")
    assert not is_luhn_valid("4111-1111-1111-1111")
    assert not is_luhn_valid("")


def test_generated_card_numbers_pass_luhn():
    """Every generated number passes the checksum"""
    source = SystemRandomSource()
    for _ in range(500):
        number = generate_card_number(source)
        assert len(number) == 16
        assert number.startswith("4")
        assert is_luhn_valid(number)


def test_generate_card_number_uses_issuer_prefix():
    number = generate_card_number(SystemRandomSource(), issuer_prefix="5")
    assert number.startswith("5")
    assert is_luhn_valid(number)


def test_mask_card_number_shows_last_four():
    assert mask_card_number("4111111111111234") == "****-****-****-1234"


def test_validate_pin():
    assert validate_pin("0042") == "0042"
    for bad in ("123", "12345", "12a4", ""):
        with pytest.raises(InvalidApplicationError):
            validate_pin(bad)


def test_add_years_handles_leap_day():
    assert add_years(date(2026, 3, 15), 5) == date(2031, 3, 15)
    assert add_years(date(2028, 2, 29), 5) == date(2033, 2, 28)
    assert add_years(date(2028, 2, 29), 4) == date(2032, 2, 29)
