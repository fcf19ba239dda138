from abc import ABC, abstractmethod
from decimal import Decimal, InvalidOperation
from typing import Dict

from .currency import quantize_money

RATE_PLACES = 4


class CommissionCalculatorInterface(ABC):
    @abstractmethod
    def calculate(self, *, amount: Decimal, currency: str) -> Dict[str, Decimal]:
        pass


class CommissionCalculationError(Exception):
    pass


class FlatRateCommissionCalculator(CommissionCalculatorInterface):
    """Applies one fixed rate to every payment.

    The rate is handed in by the caller; nothing here reads settings, so the
    calculator can be exercised with any rate. Amounts are rounded half-up
    at the currency's minor unit.
    """

    def __init__(self, rate):
        try:
            rate = Decimal(str(rate))
        except InvalidOperation:
            raise CommissionCalculationError(f"invalid commission rate: {rate!r}")
        if not rate.is_finite() or not (Decimal("0") <= rate <= Decimal("1")):
            raise CommissionCalculationError("commission rate must be between 0 and 1")
        if rate.as_tuple().exponent < -RATE_PLACES:
            raise CommissionCalculationError(f"commission rate supports at most {RATE_PLACES} decimal places")
        self.rate = rate

    def calculate(self, *, amount: Decimal, currency: str) -> Dict[str, Decimal]:
        if not isinstance(amount, Decimal):
            raise CommissionCalculationError("amount must be a Decimal")
        if amount <= 0:
            raise CommissionCalculationError("amount must be > 0")

        try:
            commission = quantize_money(amount * self.rate, currency)
        except ValueError as e:
            raise CommissionCalculationError(str(e))

        return {
            "commission_rate": self.rate,
            "commission_amount": commission,
        }
