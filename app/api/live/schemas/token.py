from pydantic import Field

from .base import CamelModel


class StreamerTokenIn(CamelModel):
    # Optional here so a missing field gets the domain's own error message
    identity: str | None = Field(default=None, description="Streamer identity")
    room: str | None = Field(default=None, description="Stream (room) name")


class TokenOut(CamelModel):
    token: str


class AudienceTokenOut(CamelModel):
    token: str | None = None
    message: str | None = None
