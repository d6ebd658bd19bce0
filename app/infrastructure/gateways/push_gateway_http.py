import logging
from typing import Any

import httpx

from app.application.interfaces.push_gateway import PushGateway, PushResult
from app.domain.errors import NotificationDeliveryError
from app.infrastructure.circuit_breaker import CircuitBreakerError, call_async, push_breaker

logger = logging.getLogger(__name__)


class PushProviderUnavailable(Exception):
    """5xx from the push provider; counts as a breaker failure."""


class PushGatewayHTTP(PushGateway):
    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout_seconds: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        HTTP push gateway (one request per device token).

        Args:
            base_url: Base URL of the push provider API
            api_key: Bearer token for the provider
            timeout_seconds: Request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout_seconds
        self._transport = transport

    async def send(
        self,
        tokens: str | list[str] | None,
        title: str,
        body: str,
        data: dict[str, Any] | None = None,
    ) -> PushResult | list[PushResult]:
        if isinstance(tokens, list):
            valid = [t for t in tokens if t]
        else:
            valid = [tokens] if tokens else []

        if not valid:
            logger.warning("Push skipped: no device tokens", extra={"title": title})
            return []

        headers = {"Authorization": f"Bearer {self._api_key}"} if self._api_key else {}
        async with httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            headers=headers,
            transport=self._transport,
        ) as client:
            results = [
                await self._send_one(client, token, title, body, data or {}) for token in valid
            ]

        return results if isinstance(tokens, list) else results[0]

    async def _send_one(
        self,
        client: httpx.AsyncClient,
        token: str,
        title: str,
        body: str,
        data: dict[str, Any],
    ) -> PushResult:
        message = {
            "token": token,
            "notification": {"title": title, "body": body},
            # Los proveedores de push exigen valores string en data
            "data": {key: str(value) for key, value in data.items()},
            "android": {"priority": "high"},
        }

        async def _post() -> httpx.Response:
            response = await client.post("/send", json=message)
            if response.status_code >= 500:
                raise PushProviderUnavailable(f"HTTP {response.status_code}")
            return response

        try:
            response = await call_async(push_breaker, _post)
        except CircuitBreakerError as exc:
            logger.error(
                "Push circuit breaker is open - service unavailable",
                extra={"circuit_state": str(exc)},
            )
            raise NotificationDeliveryError(
                "Push service temporarily unavailable (circuit breaker open)",
                error_code="CIRCUIT_OPEN",
            ) from exc
        except httpx.TimeoutException as exc:
            logger.warning("Push request timeout", extra={"timeout": self._timeout})
            raise NotificationDeliveryError(str(exc) or "timeout", error_code="TIMEOUT") from exc
        except (httpx.HTTPError, PushProviderUnavailable) as exc:
            logger.error("Push provider error", extra={"error": str(exc)})
            raise NotificationDeliveryError(str(exc), error_code="PUSH_UNAVAILABLE") from exc

        if response.is_success:
            try:
                payload = response.json()
            except ValueError:
                payload = {}
            message_id = None
            if isinstance(payload, dict):
                message_id = payload.get("name") or payload.get("message_id")
            return PushResult(token=token, success=True, message_id=message_id)

        logger.warning(
            "Push rejected for token",
            extra={"http_status": response.status_code, "error": response.text[:200]},
        )
        return PushResult(token=token, success=False, error=f"HTTP {response.status_code}: {response.text[:200]}")
