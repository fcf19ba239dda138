import logging

from django.core.management.base import BaseCommand, CommandError

from payments.services.settlement import SettlementError, SettlementProcessor

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Replays a gateway status notification for one payment."

    def add_arguments(self, parser):
        parser.add_argument("gateway_payment_id")
        parser.add_argument("status", help="pending, paid, failed or refunded")
        parser.add_argument(
            "--response",
            dest="gateway_response",
            default=None,
            help="Raw gateway payload to store with the payment.",
        )

    def handle(self, *args, **options):
        gateway_payment_id = options["gateway_payment_id"]
        try:
            payment = SettlementProcessor().settle(
                gateway_payment_id,
                options["status"],
                options["gateway_response"],
            )
        except SettlementError as e:
            logger.warning("Manual settlement of %s failed: %s", gateway_payment_id, e)
            raise CommandError(str(e))

        self.stdout.write(
            self.style.SUCCESS(
                f"Payment {payment.pk} ({gateway_payment_id}) is now {payment.status}"
            )
        )
