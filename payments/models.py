from django.db import models
from django.db.models import Q
from django.utils import timezone

from projects.models import Account, Project


class PaymentStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    PAID = "paid", "Paid"
    FAILED = "failed", "Failed"
    REFUNDED = "refunded", "Refunded"


class Payment(models.Model):
    project = models.ForeignKey(Project, on_delete=models.PROTECT, related_name="payments")
    user = models.ForeignKey(Account, on_delete=models.PROTECT, related_name="payments")
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    currency = models.CharField(max_length=3)
    payment_method = models.CharField(max_length=32, null=True, blank=True)
    payment_gateway = models.CharField(max_length=32)
    # assigned by the gateway; NULL until then, unique afterwards
    gateway_payment_id = models.CharField(max_length=128, unique=True, null=True, blank=True)
    gateway_response = models.TextField(null=True, blank=True)
    status = models.CharField(max_length=16, choices=PaymentStatus.choices, default=PaymentStatus.PENDING)
    paid_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(status=PaymentStatus.PAID, paid_at__isnull=False)
                    | (~Q(status=PaymentStatus.PAID) & Q(paid_at__isnull=True))
                ),
                name="payment_paid_at_matches_status",
            ),
        ]

    def __str__(self):
        return self.gateway_payment_id or f"payment-{self.pk}"


class CommissionEarning(models.Model):
    reseller = models.ForeignKey(Account, on_delete=models.PROTECT, related_name="commission_earnings")
    project = models.ForeignKey(Project, on_delete=models.PROTECT, related_name="commission_earnings")
    # one earning per payment; the unique index is what makes recording idempotent
    payment = models.OneToOneField(Payment, on_delete=models.PROTECT, related_name="commission_earning")
    commission_rate = models.DecimalField(max_digits=5, decimal_places=4)
    commission_amount = models.DecimalField(max_digits=12, decimal_places=2)
    earned_at = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(default=timezone.now)

    def __str__(self):
        return f"{self.reseller_id}:{self.commission_amount}"
