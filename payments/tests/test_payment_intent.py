from decimal import Decimal

from django.test import TestCase

from payments.models import Payment, PaymentStatus
from payments.services.payment_intent import create_payment
from payments.services.payment_validator import PaymentValidationError

from .utils import make_project


class CreatePaymentTests(TestCase):
    def setUp(self):
        self.project = make_project()

    def create(self, **overrides):
        kwargs = {
            "project_id": self.project.pk,
            "user_id": self.project.owner_id,
            "amount": Decimal("150000.00"),
            "currency": "IDR",
            "payment_gateway": "midtrans",
        }
        kwargs.update(overrides)
        return create_payment(**kwargs)

    def test_creates_pending_payment(self):
        payment = self.create(gateway_payment_id="mt-abc", payment_method="bank_transfer")
        payment.refresh_from_db()
        self.assertEqual(payment.status, PaymentStatus.PENDING)
        self.assertIsNone(payment.paid_at)
        self.assertEqual(payment.amount, Decimal("150000.00"))
        self.assertEqual(payment.currency, "IDR")
        self.assertEqual(payment.gateway_payment_id, "mt-abc")
        self.assertEqual(payment.payment_method, "bank_transfer")

    def test_gateway_id_may_be_assigned_later(self):
        first = self.create()
        second = self.create()
        self.assertIsNone(first.gateway_payment_id)
        self.assertIsNone(second.gateway_payment_id)

    def test_normalises_codes(self):
        payment = self.create(currency="idr", payment_gateway="Midtrans")
        self.assertEqual(payment.currency, "IDR")
        self.assertEqual(payment.payment_gateway, "midtrans")

    def test_unknown_project(self):
        with self.assertRaises(PaymentValidationError) as ctx:
            self.create(project_id=self.project.pk + 1000)
        self.assertEqual(ctx.exception.status_code, 404)

    def test_unknown_user(self):
        with self.assertRaises(PaymentValidationError) as ctx:
            self.create(user_id=999999)
        self.assertEqual(ctx.exception.status_code, 404)

    def test_unsupported_currency(self):
        with self.assertRaises(PaymentValidationError) as ctx:
            self.create(currency="EUR")
        self.assertEqual(ctx.exception.status_code, 422)

    def test_malformed_currency(self):
        with self.assertRaises(PaymentValidationError) as ctx:
            self.create(currency="RUPIAH")
        self.assertEqual(ctx.exception.status_code, 400)

    def test_rejects_non_positive_and_float_amounts(self):
        for amount in (Decimal("0"), Decimal("-5.00"), 10.5):
            with self.subTest(amount=amount):
                with self.assertRaises(PaymentValidationError):
                    self.create(amount=amount)

    def test_rejects_sub_cent_amount(self):
        with self.assertRaises(PaymentValidationError):
            self.create(amount=Decimal("10.001"), currency="USD")

    def test_unsupported_gateway(self):
        with self.assertRaises(PaymentValidationError) as ctx:
            self.create(payment_gateway="paypal")
        self.assertEqual(ctx.exception.status_code, 422)

    def test_duplicate_gateway_id_conflicts(self):
        self.create(gateway_payment_id="mt-dup")
        with self.assertRaises(PaymentValidationError) as ctx:
            self.create(gateway_payment_id="mt-dup")
        self.assertEqual(ctx.exception.status_code, 409)
        self.assertEqual(Payment.objects.filter(gateway_payment_id="mt-dup").count(), 1)
