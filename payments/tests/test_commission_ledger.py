from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.db import IntegrityError
from django.test import TestCase
from django.utils import timezone

from payments.models import CommissionEarning
from payments.services.commission_calculator import FlatRateCommissionCalculator
from payments.services.commission_ledger import get_reseller_earnings, record_commission_if_due
from projects.models import Account

from .utils import make_account, make_payment, make_project


class RecordCommissionTests(TestCase):
    def setUp(self):
        self.calc = FlatRateCommissionCalculator(Decimal("0.10"))
        self.reseller = make_account(Account.Role.RESELLER)
        self.project = make_project(reseller=self.reseller)
        self.payment = make_payment(project=self.project, amount="299.99", currency="USD")

    def test_records_earning(self):
        earning = record_commission_if_due(self.payment, self.project, calculator=self.calc)
        self.assertIsNotNone(earning)
        earning.refresh_from_db()
        self.assertEqual(earning.reseller_id, self.reseller.pk)
        self.assertEqual(earning.project_id, self.project.pk)
        self.assertEqual(earning.payment_id, self.payment.pk)
        self.assertEqual(earning.commission_rate, Decimal("0.1000"))
        self.assertEqual(earning.commission_amount, Decimal("30.00"))
        self.assertIsNotNone(earning.earned_at)

    def test_second_call_is_a_noop(self):
        first = record_commission_if_due(self.payment, self.project, calculator=self.calc)
        with self.assertLogs("payments.services.commission_ledger", level="INFO"):
            second = record_commission_if_due(self.payment, self.project, calculator=self.calc)
        self.assertIsNone(second)
        self.assertEqual(CommissionEarning.objects.filter(payment=self.payment).count(), 1)
        self.assertEqual(CommissionEarning.objects.get(payment=self.payment).pk, first.pk)

    def test_duplicate_with_different_rate_keeps_first_row(self):
        record_commission_if_due(self.payment, self.project, calculator=self.calc)
        other = FlatRateCommissionCalculator(Decimal("0.50"))
        self.assertIsNone(record_commission_if_due(self.payment, self.project, calculator=other))
        earning = CommissionEarning.objects.get(payment=self.payment)
        self.assertEqual(earning.commission_amount, Decimal("30.00"))

    def test_no_reseller(self):
        project = make_project()
        payment = make_payment(project=project)
        self.assertIsNone(record_commission_if_due(payment, project, calculator=self.calc))
        self.assertFalse(CommissionEarning.objects.exists())

    def test_reseller_without_reseller_role(self):
        project = make_project(reseller=make_account(Account.Role.USER))
        payment = make_payment(project=project)
        with self.assertLogs("payments.services.commission_ledger", level="WARNING"):
            self.assertIsNone(record_commission_if_due(payment, project, calculator=self.calc))
        self.assertFalse(CommissionEarning.objects.exists())

    def test_inactive_reseller(self):
        project = make_project(reseller=make_account(Account.Role.RESELLER, is_active=False))
        payment = make_payment(project=project)
        with self.assertLogs("payments.services.commission_ledger", level="WARNING"):
            self.assertIsNone(record_commission_if_due(payment, project, calculator=self.calc))

    def test_unrelated_integrity_error_propagates(self):
        with mock.patch.object(CommissionEarning.objects, "create", side_effect=IntegrityError("fk")):
            with self.assertRaises(IntegrityError):
                record_commission_if_due(self.payment, self.project, calculator=self.calc)


class ResellerEarningsTests(TestCase):
    def test_newest_first_and_scoped_to_reseller(self):
        calc = FlatRateCommissionCalculator(Decimal("0.10"))
        reseller = make_account(Account.Role.RESELLER)
        other = make_account(Account.Role.RESELLER)
        project = make_project(reseller=reseller)
        older = record_commission_if_due(make_payment(project=project), project, calculator=calc)
        newer = record_commission_if_due(make_payment(project=project), project, calculator=calc)
        CommissionEarning.objects.filter(pk=older.pk).update(earned_at=timezone.now() - timedelta(days=1))
        other_project = make_project(reseller=other)
        record_commission_if_due(make_payment(project=other_project), other_project, calculator=calc)

        earnings = get_reseller_earnings(reseller.pk)
        self.assertEqual([e.pk for e in earnings], [newer.pk, older.pk])
        self.assertIsInstance(earnings[0].commission_amount, Decimal)

    def test_empty(self):
        self.assertEqual(get_reseller_earnings(make_account(Account.Role.RESELLER).pk), [])
