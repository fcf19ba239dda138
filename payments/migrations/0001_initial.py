import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("projects", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Payment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("currency", models.CharField(max_length=3)),
                ("payment_method", models.CharField(blank=True, max_length=32, null=True)),
                ("payment_gateway", models.CharField(max_length=32)),
                ("gateway_payment_id", models.CharField(blank=True, max_length=128, null=True, unique=True)),
                ("gateway_response", models.TextField(blank=True, null=True)),
                ("status", models.CharField(choices=[("pending", "Pending"), ("paid", "Paid"), ("failed", "Failed"), ("refunded", "Refunded")], default="pending", max_length=16)),
                ("paid_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("project", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="payments", to="projects.project")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="payments", to="projects.account")),
            ],
            options={
                "constraints": [
                    models.CheckConstraint(
                        condition=(
                            models.Q(("paid_at__isnull", False), ("status", "paid"))
                            | models.Q(models.Q(("status", "paid"), _negated=True), ("paid_at__isnull", True))
                        ),
                        name="payment_paid_at_matches_status",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="CommissionEarning",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("commission_rate", models.DecimalField(decimal_places=4, max_digits=5)),
                ("commission_amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("earned_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("payment", models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name="commission_earning", to="payments.payment")),
                ("project", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="commission_earnings", to="projects.project")),
                ("reseller", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="commission_earnings", to="projects.account")),
            ],
        ),
    ]
