from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from payments.models import Payment
from payments.services.commission_ledger import get_reseller_earnings
from payments.services.payment_intent import create_payment
from payments.services.payment_validator import PaymentValidationError
from payments.services.settlement import SettlementError, SettlementProcessor
from projects.models import Account

from .serializers import (
    CommissionEarningSerializer,
    PaymentNotificationSerializer,
    PaymentRequestSerializer,
    PaymentSerializer,
)


class PaymentCreateView(APIView):
    def post(self, request):
        serializer = PaymentRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            payment = create_payment(
                project_id=data["project_id"],
                user_id=data["user_id"],
                amount=data["amount"],
                currency=data["currency"],
                payment_gateway=data["payment_gateway"],
                gateway_payment_id=data.get("gateway_payment_id"),
                payment_method=data.get("payment_method"),
            )
        except PaymentValidationError as e:
            return Response({"detail": str(e)}, status=e.status_code)

        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)


class PaymentNotificationView(APIView):
    """Entry point for gateway status notifications (webhooks).

    Anything other than 2xx makes the gateway redeliver, so only transient
    storage failures answer 503; unknown payments and bad statuses are hard
    4xx failures.
    """

    def post(self, request):
        serializer = PaymentNotificationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            payment = SettlementProcessor().settle(
                data["gateway_payment_id"],
                data["status"],
                data.get("gateway_response") or None,
            )
        except SettlementError as e:
            body = {"detail": str(e)}
            if e.retryable:
                body["retryable"] = True
            return Response(body, status=e.status_code)

        return Response(PaymentSerializer(payment).data)


class PaymentDetailView(APIView):
    def get(self, request, pk):
        payment = Payment.objects.filter(pk=pk).first()
        if payment is None:
            return Response({"detail": "payment not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(PaymentSerializer(payment).data)


class ResellerEarningsView(APIView):
    def get(self, request, reseller_id):
        if not Account.objects.filter(pk=reseller_id, role=Account.Role.RESELLER).exists():
            return Response({"detail": "reseller not found"}, status=status.HTTP_404_NOT_FOUND)
        earnings = get_reseller_earnings(reseller_id)
        return Response(CommissionEarningSerializer(earnings, many=True).data)
