"""Reconciles gateway payment notifications into the payment ledger.

Gateways deliver notifications at least once and in no particular order, so
`settle` treats every call as "set the payment to this status" and makes the
side effects of reaching `paid` (project flag, reseller commission) safe to
repeat.
"""
import logging
from typing import Optional

from django.conf import settings
from django.db import InterfaceError, OperationalError, transaction
from django.utils import timezone
from rest_framework import status

from payments.models import Payment, PaymentStatus
from projects.models import Project
from projects.services import mark_project_paid

from .commission_calculator import (
    CommissionCalculationError,
    CommissionCalculatorInterface,
    FlatRateCommissionCalculator,
)
from .commission_ledger import record_commission_if_due

logger = logging.getLogger(__name__)

# applied anyway, but worth a look: usually a stale notification arriving late
SUSPICIOUS_TRANSITIONS = {
    (PaymentStatus.PAID, PaymentStatus.PENDING),
    (PaymentStatus.PAID, PaymentStatus.FAILED),
    (PaymentStatus.REFUNDED, PaymentStatus.PENDING),
    (PaymentStatus.REFUNDED, PaymentStatus.PAID),
    (PaymentStatus.REFUNDED, PaymentStatus.FAILED),
}


class SettlementError(Exception):
    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST, retryable: bool = False):
        super().__init__(message)
        self.status_code = status_code
        self.retryable = retryable


class PaymentNotFound(SettlementError):
    def __init__(self, gateway_payment_id: str):
        super().__init__(
            f"payment not found for gateway payment id: {gateway_payment_id}",
            status.HTTP_404_NOT_FOUND,
        )
        self.gateway_payment_id = gateway_payment_id


class InvalidSettlementArgument(SettlementError):
    pass


class StorageUnavailable(SettlementError):
    def __init__(self, message: str):
        super().__init__(message, status.HTTP_503_SERVICE_UNAVAILABLE, retryable=True)


class UnsettleablePayment(SettlementError):
    """The stored payment cannot be settled as it is; redelivery will not help."""

    def __init__(self, message: str):
        super().__init__(message, status.HTTP_422_UNPROCESSABLE_ENTITY)


def validate_payment_status(value) -> PaymentStatus:
    try:
        return PaymentStatus(value)
    except ValueError:
        raise InvalidSettlementArgument(
            f"invalid payment status {value!r}; expected one of {', '.join(PaymentStatus.values)}"
        )


class SettlementProcessor:
    def __init__(self, commission_calculator: Optional[CommissionCalculatorInterface] = None):
        if commission_calculator is None:
            commission_calculator = FlatRateCommissionCalculator(settings.RESELLER_COMMISSION_RATE)
        self.commission_calculator = commission_calculator

    def settle(self, gateway_payment_id: str, new_status, gateway_response: Optional[str] = None) -> Payment:
        if not gateway_payment_id:
            raise InvalidSettlementArgument("gateway payment id required")
        new_status = validate_payment_status(new_status)

        try:
            payment, previous = self._apply(gateway_payment_id, new_status, gateway_response)
        except (OperationalError, InterfaceError) as e:
            logger.exception("Storage unavailable while settling %s", gateway_payment_id)
            raise StorageUnavailable(f"storage unavailable: {e}") from e
        except CommissionCalculationError as e:
            logger.error("Cannot compute commission while settling %s: %s", gateway_payment_id, e)
            raise UnsettleablePayment(f"cannot settle payment {gateway_payment_id}: {e}") from e

        logger.info(
            "Settled payment %s (%s): %s -> %s",
            payment.pk,
            gateway_payment_id,
            previous,
            payment.status,
        )
        return payment

    def _apply(self, gateway_payment_id: str, new_status: PaymentStatus, gateway_response: Optional[str]):
        # payment update, project flag and commission commit or roll back together
        with transaction.atomic():
            payment = Payment.objects.select_for_update().filter(gateway_payment_id=gateway_payment_id).first()
            if payment is None:
                logger.warning("No payment matches gateway payment id %s", gateway_payment_id)
                raise PaymentNotFound(gateway_payment_id)

            previous = PaymentStatus(payment.status)
            if (previous, new_status) in SUSPICIOUS_TRANSITIONS:
                logger.warning(
                    "Suspicious status change for payment %s (%s): %s -> %s",
                    payment.pk,
                    gateway_payment_id,
                    previous,
                    new_status,
                )

            now = timezone.now()
            if new_status == PaymentStatus.PAID:
                # a redelivered "paid" keeps the original settlement time
                if previous != PaymentStatus.PAID or payment.paid_at is None:
                    payment.paid_at = now
            else:
                payment.paid_at = None
            payment.status = new_status
            payment.gateway_response = gateway_response
            payment.updated_at = now
            payment.save(update_fields=["status", "gateway_response", "paid_at", "updated_at"])

            if new_status == PaymentStatus.PAID:
                mark_project_paid(payment.project_id)
                project = Project.objects.get(pk=payment.project_id)
                record_commission_if_due(payment, project, calculator=self.commission_calculator)

        return payment, previous


def settle(gateway_payment_id: str, new_status, gateway_response: Optional[str] = None) -> Payment:
    return SettlementProcessor().settle(gateway_payment_id, new_status, gateway_response)
