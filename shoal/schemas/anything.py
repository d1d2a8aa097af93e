from typing import Any

from pydantic import BaseModel, Field


class AnythingResponse(BaseModel):
    """Details about the caller's request, similar to httpbin."""

    method: str
    url: str
    # Single value per name is a string, repeated names become a list
    args: dict[str, str | list[str]]
    headers: dict[str, str]
    # Full body; non-UTF-8 data is replaced with placeholders
    data: str
    json_body: Any = Field(default=None, serialization_alias="json")
