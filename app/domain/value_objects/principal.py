"""Value Object AuthenticatedPrincipal - identidad resuelta del llamador."""

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    """Roles de cuenta del marketplace."""

    CUSTOMER = "customer"
    DRIVER = "driver"
    PARTNER = "partner"
    USER = "user"


@dataclass(frozen=True)
class AuthenticatedPrincipal:
    """
    Identidad del llamador tal como la resuelve el servicio de identidad.

    Attributes:
        linked_id: ID de la cuenta de rol (customer, driver o partner).
        role: Rol de la cuenta.
        user_id: ID del usuario genérico, si lo hay.
    """

    linked_id: str
    role: Role
    user_id: str | None = None

    def __post_init__(self) -> None:
        if not self.linked_id:
            raise ValueError("linked_id no puede estar vacío")
