from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List

from django.conf import settings


def _minor_units() -> Dict[str, int]:
    return {code.upper(): places for code, places in settings.CURRENCY_MINOR_UNITS.items()}


def supported_currencies() -> List[str]:
    """Return the ISO 4217 codes money can be settled in."""
    return list(_minor_units().keys())


def minor_unit_places(currency: str) -> int:
    places = _minor_units().get((currency or "").upper())
    if places is None:
        raise ValueError(f"unsupported currency: {currency}")
    return places


def quantize_money(amount: Decimal, currency: str) -> Decimal:
    """Round half-up to the currency's minor unit, e.g. 29.999 USD -> 30.00."""
    exponent = Decimal(1).scaleb(-minor_unit_places(currency))
    return amount.quantize(exponent, rounding=ROUND_HALF_UP)
