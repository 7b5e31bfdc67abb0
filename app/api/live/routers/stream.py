"""Livestream lifecycle endpoints."""

from fastapi import APIRouter, Depends

from app.api.live.dependency import get_stream_service
from app.api.live.schemas.stream import EndStreamIn, MessageOut, StartStreamIn, StreamDetails
from app.domain.live.stream.stream_domain import StreamService

router = APIRouter()


@router.post("/start")
async def start_stream(
    body: StartStreamIn | None = None,
    service: StreamService = Depends(get_stream_service),
) -> StreamDetails:
    """Start a new livestream with a room, player streamer and media processor.

    The response must be kept by the client and sent back to /end.
    """
    body = body or StartStreamIn()
    session = await service.start_stream(body.stream_name)
    return StreamDetails.from_session(session)


@router.post("/end")
async def end_stream(
    body: EndStreamIn,
    service: StreamService = Depends(get_stream_service),
) -> MessageOut:
    """End a livestream started by /start."""
    result = await service.end_stream(body.stream_details.to_session())
    return MessageOut(message=result.message)
