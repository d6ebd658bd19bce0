from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class StripeWebhookEnvelope(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str | None = None
    type: str
    data: dict[str, Any] = Field(default_factory=dict)
    livemode: bool | None = None
    created: int | None = None
