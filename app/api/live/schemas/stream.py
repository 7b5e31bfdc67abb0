from pydantic import Field

from app.domain.live.stream.stream_models import StreamSession

from .base import CamelModel


class StartStreamIn(CamelModel):
    stream_name: str = Field(default="", description="Unique name of the livestream room")


class StreamDetails(CamelModel):
    stream_name: str = Field(default="", description="Name the stream was started with")
    room_id: str = Field(description="Twilio room sid")
    player_streamer_id: str = Field(description="Twilio player streamer sid")
    media_processor_id: str = Field(description="Twilio media processor sid")

    @classmethod
    def from_session(cls, session: StreamSession) -> "StreamDetails":
        return cls(
            stream_name=session.stream_name,
            room_id=session.room_id,
            player_streamer_id=session.player_streamer_id,
            media_processor_id=session.media_processor_id,
        )

    def to_session(self) -> StreamSession:
        return StreamSession(
            stream_name=self.stream_name,
            room_id=self.room_id,
            player_streamer_id=self.player_streamer_id,
            media_processor_id=self.media_processor_id,
        )


class EndStreamIn(CamelModel):
    stream_details: StreamDetails = Field(description="Details returned by /start")


class MessageOut(CamelModel):
    message: str
