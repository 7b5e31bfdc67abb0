"""Access token endpoints for streamers and audience members."""

from fastapi import APIRouter, Depends

from app.api.live.dependency import get_token_service
from app.api.live.schemas.token import AudienceTokenOut, StreamerTokenIn, TokenOut
from app.domain.live.token.token_domain import TokenService

router = APIRouter()


@router.post("/streamerToken")
async def streamer_token(
    body: StreamerTokenIn | None = None,
    service: TokenService = Depends(get_token_service),
) -> TokenOut:
    """Get an access token allowing a streamer to publish into a room."""
    body = body or StreamerTokenIn()
    token = service.issue_streamer_token(identity=body.identity, room=body.room)
    return TokenOut(token=token)


@router.post("/audienceToken", response_model_exclude_none=True)
async def audience_token(
    service: TokenService = Depends(get_token_service),
) -> AudienceTokenOut:
    """Get a playback token for the current livestream.

    Returns `{message}` instead of `{token}` when no one is streaming.
    """
    result = await service.issue_audience_token()
    return AudienceTokenOut(token=result.token, message=result.message)
