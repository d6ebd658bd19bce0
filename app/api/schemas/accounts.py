from app.api.schemas.common import CamelModel


class AccountRemovalResponse(CamelModel):
    account_id: str
    role: str
    deleted_bookings: int
    deleted_cars: int = 0
