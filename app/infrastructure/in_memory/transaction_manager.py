import asyncio
from contextlib import asynccontextmanager
from contextvars import ContextVar

from app.application.interfaces.transaction_manager import TransactionManager

_inside_transaction: ContextVar[bool] = ContextVar("_inside_transaction", default=False)


class InMemoryTransactionManager(TransactionManager):
    """
    Serializa las unidades de trabajo sobre los repositorios en memoria.

    Equivale al bloqueo de filas del modo SQL: dos creaciones concurrentes no
    pueden intercalar la verificación de solapamiento y la inserción.
    Los bloques anidados en la misma tarea reutilizan el lock.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def start(self):
        if _inside_transaction.get():
            yield
            return
        async with self._lock:
            token = _inside_transaction.set(True)
            try:
                yield
            finally:
                _inside_transaction.reset(token)
