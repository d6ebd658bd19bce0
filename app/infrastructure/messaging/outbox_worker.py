"""Worker que drena el outbox de notificaciones en segundo plano."""

import asyncio
import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from uuid import uuid4

from app.application.dtos.booking_dto import OutboxRunDTO
from app.application.use_cases.dispatch_notifications import DispatchNotificationsUseCase

logger = logging.getLogger(__name__)

DispatcherFactory = Callable[[], AbstractAsyncContextManager[DispatchNotificationsUseCase]]


class OutboxWorker:
    """
    Worker que procesa eventos del outbox de forma periódica.

    Recoge los eventos que el despacho post-commit no pudo entregar
    (reintentos con backoff, procesos caídos con lock expirado).

    Características:
    - Polling configurable
    - Un despachador nuevo (y una sesión nueva en modo SQL) por ciclo
    - Graceful shutdown
    """

    def __init__(
        self,
        dispatcher_factory: DispatcherFactory,
        worker_id: str | None = None,
        poll_interval_seconds: float = 5.0,
        batch_size: int = 20,
    ) -> None:
        """
        Inicializa el worker.

        Args:
            dispatcher_factory: Context manager que entrega un DispatchNotificationsUseCase.
            worker_id: Identificador único del worker (auto-generado si no se provee).
            poll_interval_seconds: Intervalo entre polls en segundos.
            batch_size: Número máximo de eventos a procesar por ciclo.
        """
        self._dispatcher_factory = dispatcher_factory
        self._worker_id = worker_id or f"worker-{uuid4().hex[:8]}"
        self._poll_interval = poll_interval_seconds
        self._batch_size = batch_size
        self._running = False
        self._task: asyncio.Task | None = None

    @property
    def worker_id(self) -> str:
        return self._worker_id

    @property
    def is_running(self) -> bool:
        return self._running

    async def run_once(self) -> OutboxRunDTO:
        """Procesa un batch de eventos listos."""
        async with self._dispatcher_factory() as dispatcher:
            return await dispatcher.execute(limit=self._batch_size, worker_id=self._worker_id)

    async def run_forever(self) -> None:
        """Loop de polling; sigue sin esperar mientras haya eventos."""
        self._running = True
        logger.info("Outbox worker started", extra={"worker_id": self._worker_id})

        while self._running:
            try:
                summary = await self.run_once()
                if summary.claimed:
                    logger.info(
                        "Outbox batch processed",
                        extra={
                            "worker_id": self._worker_id,
                            "claimed": summary.claimed,
                            "done": summary.done,
                            "retried": summary.retried,
                            "failed": summary.failed,
                        },
                    )
                    continue
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Outbox worker cycle failed", extra={"worker_id": self._worker_id})
            await asyncio.sleep(self._poll_interval)

    def start(self) -> asyncio.Task:
        """Lanza el loop como tarea de fondo."""
        self._task = asyncio.create_task(self.run_forever(), name=self._worker_id)
        return self._task

    async def stop(self) -> None:
        """Detiene el worker de forma graceful."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Outbox worker stopped", extra={"worker_id": self._worker_id})
