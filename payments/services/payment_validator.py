from decimal import Decimal

from django.conf import settings
from rest_framework import status

from .currency import minor_unit_places, quantize_money, supported_currencies


class PaymentValidationError(Exception):
    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(message)
        self.status_code = status_code


def validate_currency(currency: str) -> None:
    if not currency or len(currency) != 3:
        raise PaymentValidationError("currency must be a 3-letter ISO 4217 code", status.HTTP_400_BAD_REQUEST)
    if currency.upper() not in supported_currencies():
        raise PaymentValidationError("unsupported currency", status.HTTP_422_UNPROCESSABLE_ENTITY)


def validate_amount(amount: Decimal, currency: str) -> None:
    if not isinstance(amount, Decimal):
        raise PaymentValidationError("amount must be an exact decimal", status.HTTP_400_BAD_REQUEST)
    if amount <= 0:
        raise PaymentValidationError("amount must be > 0", status.HTTP_400_BAD_REQUEST)
    if quantize_money(amount, currency) != amount:
        places = minor_unit_places(currency)
        raise PaymentValidationError(
            f"{currency.upper()} amounts allow at most {places} decimal places",
            status.HTTP_400_BAD_REQUEST,
        )


def validate_payment_gateway(payment_gateway: str) -> None:
    if not payment_gateway:
        raise PaymentValidationError("payment_gateway required", status.HTTP_400_BAD_REQUEST)
    if payment_gateway.lower() not in [g.lower() for g in settings.PAYMENT_GATEWAYS]:
        raise PaymentValidationError("unsupported payment_gateway", status.HTTP_422_UNPROCESSABLE_ENTITY)


def validate_payment_request_data(data: dict) -> None:
    """Run all validations for a payment intent payload. Raises PaymentValidationError on error."""
    currency = data.get("currency")
    validate_currency(currency)
    validate_amount(data.get("amount"), currency)
    validate_payment_gateway(data.get("payment_gateway"))
