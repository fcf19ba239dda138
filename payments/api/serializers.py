from rest_framework import serializers

from payments.models import CommissionEarning, Payment


class PaymentRequestSerializer(serializers.Serializer):
    project_id = serializers.IntegerField()
    user_id = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    currency = serializers.CharField(max_length=3)
    payment_gateway = serializers.CharField(max_length=32)
    gateway_payment_id = serializers.CharField(max_length=128, required=False, allow_null=True, allow_blank=True)
    payment_method = serializers.CharField(max_length=32, required=False, allow_null=True, allow_blank=True)


class PaymentNotificationSerializer(serializers.Serializer):
    # status stays a plain string so an unknown value reaches the settlement check
    gateway_payment_id = serializers.CharField(max_length=128)
    status = serializers.CharField(max_length=16)
    gateway_response = serializers.CharField(required=False, allow_null=True, allow_blank=True, trim_whitespace=False)


class PaymentSerializer(serializers.ModelSerializer):
    project_id = serializers.IntegerField(read_only=True)
    user_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Payment
        fields = [
            "id",
            "project_id",
            "user_id",
            "amount",
            "currency",
            "payment_method",
            "payment_gateway",
            "gateway_payment_id",
            "gateway_response",
            "status",
            "paid_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CommissionEarningSerializer(serializers.ModelSerializer):
    reseller_id = serializers.IntegerField(read_only=True)
    project_id = serializers.IntegerField(read_only=True)
    payment_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = CommissionEarning
        fields = [
            "id",
            "reseller_id",
            "project_id",
            "payment_id",
            "commission_rate",
            "commission_amount",
            "earned_at",
            "created_at",
        ]
        read_only_fields = fields
