"""Shared schema pieces."""

from pydantic import BaseModel

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"
SLUG = r"^[a-z0-9-]+$"


class MessageResponse(BaseModel):
    success: bool = True
    message: str | None = None
