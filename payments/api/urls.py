from django.urls import path
from .views import PaymentCreateView, PaymentDetailView, PaymentNotificationView, ResellerEarningsView

urlpatterns = [
    path("payments", PaymentCreateView.as_view(), name="payments"),
    path("payments/notifications", PaymentNotificationView.as_view(), name="payment-notifications"),
    path("payments/<int:pk>", PaymentDetailView.as_view(), name="payment-detail"),
    path("resellers/<int:reseller_id>/earnings", ResellerEarningsView.as_view(), name="reseller-earnings"),
]
