"""Shared Schema Types — URL fields and plain acknowledgement responses."""

from typing import Annotated

from pydantic import AfterValidator, BaseModel, HttpUrl

# Validated as http(s) URL, stored and returned as plain str
HttpUrlStr = Annotated[HttpUrl, AfterValidator(str)]


class MessageResponse(BaseModel):
    success: bool = True
    message: str


def reject_fields(data, fields: tuple[str, ...], message: str):
    """Raise ValueError when raw request data carries any of fields."""
    if isinstance(data, dict) and any(f in data for f in fields):
        raise ValueError(message)
    return data
