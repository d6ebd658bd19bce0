import json

from app.application.interfaces.stripe_gateway import StripeGateway


class StubStripeGateway(StripeGateway):
    """Acepta el payload sin verificar firma (modo en memoria / tests)."""

    async def parse_webhook_event(
        self,
        payload: bytes,
        signature_header: str | None,
        webhook_secret: str | None,
    ) -> dict:
        if not payload:
            raise ValueError("Empty webhook payload")
        try:
            event = json.loads(payload.decode() or "{}")
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ValueError("Invalid webhook payload") from exc
        if not isinstance(event, dict):
            raise ValueError("Invalid webhook payload")
        return event
