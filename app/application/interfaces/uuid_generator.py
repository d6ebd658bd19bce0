"""Interface UUIDGenerator - Puerto para generación de identificadores únicos."""

import uuid
from abc import ABC, abstractmethod


class UUIDGenerator(ABC):
    """
    Puerto para generación de identificadores únicos.

    Permite inyectar implementaciones fake para testing determinista.
    """

    @abstractmethod
    def generate_id(self) -> str:
        """
        Genera un identificador para un booking o una notificación.

        Returns:
            String hexadecimal de 32 caracteres.
        """
        raise NotImplementedError


class RealUUIDGenerator(UUIDGenerator):
    """Implementación real que genera UUIDs aleatorios."""

    def generate_id(self) -> str:
        return uuid.uuid4().hex


class FakeUUIDGenerator(UUIDGenerator):
    """Genera valores predecibles para pruebas deterministas."""

    def __init__(self, prefix: str = "test"):
        self._prefix = prefix
        self._counter = 0

    def generate_id(self) -> str:
        self._counter += 1
        return f"{self._prefix}-{self._counter:06d}"

    def reset(self) -> None:
        self._counter = 0
