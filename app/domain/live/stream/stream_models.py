"""Livestream domain models."""

from pydantic import BaseModel


class StreamSession(BaseModel):
    """Vendor identifiers for one livestream.

    Not stored server-side; the caller keeps it and echoes it back to end the stream.
    """

    stream_name: str
    room_id: str
    player_streamer_id: str
    media_processor_id: str


class EndStreamResult(BaseModel):
    stream_name: str
    message: str
