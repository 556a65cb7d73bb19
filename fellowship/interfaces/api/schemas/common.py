"""Base model and envelopes shared by every API schema."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serialize fields in camelCase while accepting snake_case input too."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ActionResponse(CamelModel):
    success: bool = True
    message: str


class ErrorResponse(CamelModel):
    success: bool = False
    message: str
    fields: list[str] | None = None
    retry_after: int | None = None


__all__ = ["ActionResponse", "CamelModel", "ErrorResponse"]
