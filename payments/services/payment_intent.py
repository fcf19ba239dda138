import logging
from decimal import Decimal
from typing import Optional

from django.db import IntegrityError, transaction
from rest_framework import status

from payments.models import Payment, PaymentStatus
from projects.models import Account, Project

from .payment_validator import PaymentValidationError, validate_payment_request_data

logger = logging.getLogger(__name__)


def create_payment(
    *,
    project_id: int,
    user_id: int,
    amount: Decimal,
    currency: str,
    payment_gateway: str,
    gateway_payment_id: Optional[str] = None,
    payment_method: Optional[str] = None,
) -> Payment:
    """Open a pending payment for a project before the buyer is sent to the gateway."""
    validate_payment_request_data(
        {"amount": amount, "currency": currency, "payment_gateway": payment_gateway}
    )

    if not Project.objects.filter(pk=project_id).exists():
        raise PaymentValidationError(f"project {project_id} not found", status.HTTP_404_NOT_FOUND)
    if not Account.objects.filter(pk=user_id).exists():
        raise PaymentValidationError(f"user {user_id} not found", status.HTTP_404_NOT_FOUND)

    try:
        with transaction.atomic():
            payment = Payment.objects.create(
                project_id=project_id,
                user_id=user_id,
                amount=amount,
                currency=currency.upper(),
                payment_gateway=payment_gateway.lower(),
                gateway_payment_id=gateway_payment_id or None,
                payment_method=payment_method or None,
                status=PaymentStatus.PENDING,
            )
    except IntegrityError:
        raise PaymentValidationError(
            f"gateway payment id {gateway_payment_id} is already in use", status.HTTP_409_CONFLICT
        )

    logger.info(
        "Created pending payment %s for project %s (%s %s via %s)",
        payment.pk,
        project_id,
        payment.amount,
        payment.currency,
        payment.payment_gateway,
    )
    return payment
