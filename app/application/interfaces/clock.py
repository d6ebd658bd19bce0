"""Interface Clock - Puerto para abstracción de tiempo."""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


class Clock(ABC):
    """
    Puerto para abstracción del tiempo del sistema.

    Permite inyectar implementaciones fake para testing determinista.
    """

    @abstractmethod
    def now(self) -> datetime:
        """
        Retorna la fecha/hora actual.

        Returns:
            datetime en UTC sin tzinfo (mismo formato que las columnas DateTime).
        """
        raise NotImplementedError


class SystemClock(Clock):
    """Implementación real que usa el reloj del sistema."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc).replace(tzinfo=None)


class FakeClock(Clock):
    """
    Implementación fake para testing.

    Permite fijar el tiempo para pruebas deterministas.
    """

    def __init__(self, fixed_time: datetime | None = None):
        self._fixed_time = fixed_time or SystemClock().now()

    def now(self) -> datetime:
        return self._fixed_time

    def set_time(self, new_time: datetime) -> None:
        self._fixed_time = new_time

    def advance(self, seconds: int = 0, minutes: int = 0, hours: int = 0, days: int = 0) -> None:
        """Avanza el tiempo fijo."""
        delta = timedelta(seconds=seconds, minutes=minutes, hours=hours, days=days)
        self._fixed_time = self._fixed_time + delta
