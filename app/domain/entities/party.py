"""Entidades de solo lectura referenciadas por un booking."""

from dataclasses import dataclass, field


@dataclass
class Car:
    """Auto publicado por un partner."""

    id: str = ""
    partner_id: str = ""
    brand: str = ""
    model: str = ""
    price_per_day: float = 0.0
    registration_number: str = ""
    pickup_location: str = ""
    dropoff_location: str = ""

    @property
    def display_name(self) -> str:
        return f"{self.brand} {self.model}".strip()


@dataclass
class Party:
    """
    Cuenta con rol en el marketplace (customer, partner o driver).

    Los tres roles comparten la forma que necesita la lógica de bookings:
    datos de contacto y tokens de push.
    """

    id: str = ""
    full_name: str = ""
    phone_number: str | None = None
    email: str | None = None
    img_url: str | None = None
    device_tokens: list[str] = field(default_factory=list)


@dataclass
class Customer(Party):
    pass


@dataclass
class Partner(Party):
    pass


@dataclass
class Driver(Party):
    pass
