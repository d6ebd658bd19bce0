import logging

from app.api.schemas.webhooks import StripeWebhookEnvelope
from app.application.interfaces.stripe_gateway import StripeGateway
from app.application.use_cases.update_payment_status import UpdatePaymentStatusUseCase
from app.domain.entities.booking import PaymentStatus
from app.domain.errors import ValidationError

# Tipo de evento de Stripe -> estado de pago del booking
EVENT_PAYMENT_STATUS = {
    "payment_intent.succeeded": PaymentStatus.COMPLETED,
    "charge.refunded": PaymentStatus.REFUNDED,
    "payment_intent.payment_failed": PaymentStatus.PENDING,
}


class HandleStripeWebhookUseCase:
    def __init__(
        self,
        update_payment_status: UpdatePaymentStatusUseCase,
        stripe_gateway: StripeGateway,
        stripe_webhook_secret: str | None,
    ) -> None:
        self._update_payment_status = update_payment_status
        self._stripe_gateway = stripe_gateway
        self._stripe_webhook_secret = stripe_webhook_secret
        self._logger = logging.getLogger(__name__)

    async def execute(self, raw_body: bytes, signature: str | None) -> str | None:
        """
        Aplica el evento al booking referenciado en la metadata.

        Retorna el booking_id actualizado, o None si el tipo de evento se ignora.
        """
        if not raw_body:
            raise ValidationError("body", "empty webhook body")
        try:
            event_dict = await self._stripe_gateway.parse_webhook_event(
                payload=raw_body,
                signature_header=signature,
                webhook_secret=self._stripe_webhook_secret,
            )
            event = StripeWebhookEnvelope.model_validate(event_dict)
        except ValueError as exc:
            raise ValidationError("body", str(exc)) from exc

        payment_status = EVENT_PAYMENT_STATUS.get(event.type)
        if payment_status is None:
            self._logger.info(
                "Stripe webhook ignored: unhandled event type",
                extra={"stripe_event_id": event.id, "event_type": event.type},
            )
            return None

        booking_id = self._extract_booking_id(event)
        if not booking_id:
            raise ValidationError("data.object.metadata.booking_id", "booking id is required")

        await self._update_payment_status.execute(booking_id, payment_status)
        self._logger.info(
            "Stripe webhook processed",
            extra={
                "stripe_event_id": event.id,
                "event_type": event.type,
                "booking_id": booking_id,
                "payment_status": payment_status.value,
            },
        )
        return booking_id

    def _extract_booking_id(self, event: StripeWebhookEnvelope) -> str | None:
        data_obj = event.data.get("object", {}) if isinstance(event.data, dict) else {}
        metadata = data_obj.get("metadata") or {}
        return metadata.get("booking_id") or metadata.get("bookingId")
