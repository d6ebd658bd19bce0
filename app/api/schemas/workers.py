from app.api.schemas.common import CamelModel


class OutboxRunResponse(CamelModel):
    claimed: int
    done: int
    retried: int
    failed: int
