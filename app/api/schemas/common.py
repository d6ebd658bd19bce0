from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorBody(BaseModel):
    code: str
    message: str


class ApiResponse(BaseModel, Generic[T]):
    """Sobre único para respuestas exitosas y de error."""

    success: bool = True
    message: str = ""
    data: T | None = None
    error: ErrorBody | None = None


def error_envelope(code: str, message: str, **extra: Any) -> dict[str, Any]:
    body = ApiResponse[None](
        success=False,
        message=message,
        error=ErrorBody(code=code, message=message),
    ).model_dump()
    body.update(extra)
    return body
