from decimal import Decimal
from itertools import count

from payments.models import Payment, PaymentStatus
from projects.models import Account, Project

_seq = count(1)


def make_account(role=Account.Role.USER, **kwargs):
    n = next(_seq)
    kwargs.setdefault("email", f"{role}{n}@example.com")
    kwargs.setdefault("full_name", f"{role.title()} {n}")
    return Account.objects.create(role=role, **kwargs)


def make_project(owner=None, reseller=None, **kwargs):
    n = next(_seq)
    kwargs.setdefault("subdomain", f"rina-budi-{n}")
    kwargs.setdefault("bride_name", "Rina")
    kwargs.setdefault("groom_name", "Budi")
    return Project.objects.create(owner=owner or make_account(), reseller=reseller, **kwargs)


def make_payment(project=None, amount="150000.00", currency="IDR", gateway_payment_id=None, **kwargs):
    project = project or make_project()
    kwargs.setdefault("status", PaymentStatus.PENDING)
    return Payment.objects.create(
        project=project,
        user=project.owner,
        amount=Decimal(amount),
        currency=currency,
        payment_gateway="midtrans",
        gateway_payment_id=gateway_payment_id or f"mt-{next(_seq)}",
        **kwargs,
    )
