import logging
from typing import List, Optional

from django.db import IntegrityError, transaction
from django.utils import timezone

from payments.models import CommissionEarning, Payment
from projects.models import Account, Project

from .commission_calculator import CommissionCalculatorInterface

logger = logging.getLogger(__name__)


def record_commission_if_due(
    payment: Payment,
    project: Project,
    *,
    calculator: CommissionCalculatorInterface,
) -> Optional[CommissionEarning]:
    """Credit the project's reseller for `payment`, at most once per payment.

    There is no lookup before the insert: the unique index on
    `CommissionEarning.payment` decides. A conflicting insert (a redelivered
    notification, or a concurrent one) is rolled back to its savepoint and
    reported as a no-op by returning None.
    """
    if project.reseller_id is None:
        return None

    reseller = Account.objects.filter(pk=project.reseller_id).first()
    if reseller is None or not reseller.is_reseller:
        logger.warning(
            "Project %s references account %s which is not an active reseller; no commission recorded",
            project.pk,
            project.reseller_id,
        )
        return None

    result = calculator.calculate(amount=payment.amount, currency=payment.currency)
    now = timezone.now()
    try:
        with transaction.atomic():
            earning = CommissionEarning.objects.create(
                reseller_id=reseller.pk,
                project_id=project.pk,
                payment_id=payment.pk,
                commission_rate=result["commission_rate"],
                commission_amount=result["commission_amount"],
                earned_at=now,
                created_at=now,
            )
    except IntegrityError:
        if not CommissionEarning.objects.filter(payment_id=payment.pk).exists():
            raise
        logger.info("Commission for payment %s already recorded; skipping", payment.pk)
        return None

    logger.info(
        "Recorded commission %s %s for reseller %s on payment %s",
        earning.commission_amount,
        payment.currency,
        reseller.pk,
        payment.pk,
    )
    return earning


def get_reseller_earnings(reseller_id: int) -> List[CommissionEarning]:
    """Newest first."""
    return list(
        CommissionEarning.objects.filter(reseller_id=reseller_id)
        .select_related("payment", "project")
        .order_by("-earned_at", "-id")
    )
