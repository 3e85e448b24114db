"""Pluggable source of the random draws the workflow treats as business inputs"""

import random
import string
from abc import ABC, abstractmethod
from origination_gateway.domain.models import CreditHistory


class RandomSource(ABC):
    """
    Every stochastic value in the workflow comes from here.

    Production wires SystemRandomSource; tests inject a scripted subclass so
    verification scores, credit scores and card numbers are predictable.
    """

    @abstractmethod
    def verification_score(self) -> float:
        """Identity verification confidence in [0, 100)"""

    @abstractmethod
    def credit_score(self) -> int:
        """FICO-style score in [300, 850)"""

    @abstractmethod
    def credit_history(self) -> CreditHistory:
        """Bureau tradeline summary"""

    @abstractmethod
    def digits(self, count: int) -> str:
        """String of count random decimal digits"""

    @abstractmethod
    def integer(self, low: int, high: int) -> int:
        """Uniform integer in [low, high]"""

    @abstractmethod
    def alphanumeric(self, count: int) -> str:
        """String of count random upper-case letters and digits"""


class SystemRandomSource(RandomSource):
    """RandomSource backed by the OS entropy pool"""

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.SystemRandom()

    def verification_score(self) -> float:
        return self.rng.random() * 100

    def credit_score(self) -> int:
        return self.rng.randrange(300, 850)

    def credit_history(self) -> CreditHistory:
        return CreditHistory(
            accounts_open=self.rng.randint(1, 15),
            accounts_closed=self.rng.randint(0, 9),
            total_credit_limit=self.rng.randint(10_000, 109_999),
            total_balance=self.rng.randint(0, 49_999),
            oldest_account=self.rng.randint(1, 20),
            average_account_age=self.rng.randint(1, 10),
            hard_inquiries=self.rng.randint(0, 4),
            delinquencies=self.rng.randint(0, 2),
            public_records=self.rng.randint(0, 1),
        )

    def digits(self, count: int) -> str:
        return "".join(self.rng.choice(string.digits) for _ in range(count))

    def integer(self, low: int, high: int) -> int:
        return self.rng.randint(low, high)

    def alphanumeric(self, count: int) -> str:
        alphabet = string.ascii_uppercase + string.digits
        return "".join(self.rng.choice(alphabet) for _ in range(count))
