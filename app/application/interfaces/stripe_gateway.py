from typing import Any


class StripeGateway:
    async def parse_webhook_event(
        self,
        payload: bytes,
        signature_header: str | None,
        webhook_secret: str | None,
    ) -> dict[str, Any]:
        raise NotImplementedError
