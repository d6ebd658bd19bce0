from dataclasses import dataclass
from typing import Any


@dataclass
class PushResult:
    token: str
    success: bool
    message_id: str | None = None
    error: str | None = None


class PushGateway:
    async def send(
        self,
        tokens: str | list[str] | None,
        title: str,
        body: str,
        data: dict[str, Any] | None = None,
    ) -> PushResult | list[PushResult]:
        """
        Envía un push a uno o varios tokens de dispositivo.

        Una lista devuelve un resultado por token, un string un único
        resultado. Sin tokens válidos devuelve [] y no falla.
        """
        raise NotImplementedError
