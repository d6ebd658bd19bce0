import json
import logging

import stripe

from app.application.interfaces.stripe_gateway import StripeGateway
from app.config import get_settings

logger = logging.getLogger(__name__)


class StripeGatewayReal(StripeGateway):
    def __init__(self, api_key: str | None = None) -> None:
        settings = get_settings()
        stripe.api_key = api_key or settings.stripe_api_key

    async def parse_webhook_event(
        self,
        payload: bytes,
        signature_header: str | None,
        webhook_secret: str | None,
    ) -> dict:
        """
        Verify (when a secret is configured) and decode a Stripe webhook.

        Raises:
            ValueError: Missing/invalid signature or malformed payload.
        """
        if webhook_secret:
            if not signature_header:
                raise ValueError("Missing Stripe-Signature header")
            try:
                stripe.Webhook.construct_event(
                    payload=payload.decode(),
                    sig_header=signature_header,
                    secret=webhook_secret,
                )
            except stripe.SignatureVerificationError as exc:
                logger.warning("Stripe webhook signature rejected")
                raise ValueError("Invalid Stripe signature") from exc
            except ValueError as exc:
                raise ValueError("Invalid Stripe webhook payload") from exc

        try:
            event = json.loads(payload.decode() or "{}")
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ValueError("Invalid webhook payload") from exc
        if not isinstance(event, dict):
            raise ValueError("Invalid webhook payload")
        return event
