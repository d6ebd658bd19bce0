import logging
from typing import Any
from uuid import uuid4

from app.application.interfaces.push_gateway import PushGateway, PushResult
from app.domain.errors import NotificationDeliveryError

logger = logging.getLogger(__name__)


class StubPushGateway(PushGateway):
    """
    Gateway de push en memoria.

    Registra cada mensaje en `sent`; `fail_next` simula una caída del
    proveedor para los próximos N envíos.
    """

    def __init__(self) -> None:
        self.sent: list[dict[str, Any]] = []
        self.fail_next = 0

    async def send(
        self,
        tokens: str | list[str] | None,
        title: str,
        body: str,
        data: dict[str, Any] | None = None,
    ) -> PushResult | list[PushResult]:
        if self.fail_next > 0:
            self.fail_next -= 1
            raise NotificationDeliveryError("Stub push provider unavailable")

        if isinstance(tokens, list):
            valid = [t for t in tokens if t]
            if not valid:
                logger.warning("Push skipped: no device tokens", extra={"title": title})
                return []
            return [self._record(t, title, body, data) for t in valid]
        if tokens:
            return self._record(tokens, title, body, data)

        logger.warning("Push skipped: no device tokens", extra={"title": title})
        return []

    def _record(self, token: str, title: str, body: str, data: dict[str, Any] | None) -> PushResult:
        self.sent.append({"token": token, "title": title, "body": body, "data": dict(data or {})})
        return PushResult(token=token, success=True, message_id=f"stub-{uuid4().hex[:12]}")

    def clear(self) -> None:
        self.sent.clear()
        self.fail_next = 0
