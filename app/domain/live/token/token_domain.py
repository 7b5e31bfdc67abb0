"""Access token issuance for streamers and audience members."""

import secrets

from loguru import logger
from twilio.jwt.access_token.grants import PlaybackGrant, VideoGrant

from app.app_config import AppEnvironConfig, get_app_environ_config
from app.services.integrations.twilio_media_service import (
    PLAYER_STREAMER_STARTED,
    TwilioMediaService,
)
from app.services.integrations.twilio_token_service import TwilioTokenService
from app.shared.api.utils import format_error
from app.utils.live_errors import LiveError, LiveErrorCode, LiveStatusCode

from .token_models import NO_ONE_STREAMING_MESSAGE, AudienceTokenResult

# 160 bits
AUDIENCE_IDENTITY_BYTES = 20


def generate_audience_identity() -> str:
    return secrets.token_hex(AUDIENCE_IDENTITY_BYTES)


class TokenService:
    def __init__(
        self,
        media: TwilioMediaService,
        tokens: TwilioTokenService,
        cfg: AppEnvironConfig | None = None,
    ) -> None:
        self.media = media
        self.tokens = tokens
        self._cfg = cfg or get_app_environ_config()

    def issue_streamer_token(self, identity: str | None, room: str | None) -> str:
        """Sign a token letting `identity` publish and subscribe in `room`.

        Purely local; no Twilio API call is made.

        Raises:
            LiveError: E_INVALID_REQUEST if identity or room is empty,
                E_TOKEN_SIGN_FAILED if signing fails
        """
        if not identity or not room:
            raise LiveError(
                errcode=LiveErrorCode.E_INVALID_REQUEST,
                errmesg="Missing identity or stream name",
                status_code=LiveStatusCode.BAD_REQUEST,
            )

        try:
            token = self.tokens.create_access_token(
                identity=identity,
                grants=[VideoGrant(room=room)],
            )
        except Exception as e:
            logger.error(f"Failed to sign streamer token for room={room}: {format_error(e)}")
            raise LiveError(
                errcode=LiveErrorCode.E_TOKEN_SIGN_FAILED,
                errmesg="Unable to create access token",
                status_code=LiveStatusCode.BAD_REQUEST,
            ) from e

        logger.info(f"Issued streamer token for identity={identity}, room={room}")
        return token

    async def issue_audience_token(self) -> AudienceTokenResult:
        """Sign a playback token for the first started player streamer.

        Returns a notice instead of a token when no player streamer is
        started; no playback grant is requested in that case.

        Raises:
            LiveError: E_TOKEN_SIGN_FAILED if listing streamers, requesting
                the playback grant or signing fails
        """
        identity = generate_audience_identity()

        try:
            streamers = await self.media.list_player_streamers(status=PLAYER_STREAMER_STARTED)
            if not streamers:
                logger.info("Audience token requested but no player streamer is started")
                return AudienceTokenResult(message=NO_ONE_STREAMING_MESSAGE)

            player_streamer = streamers[0]
            playback_grant = await self.media.create_playback_grant(
                player_streamer.sid,
                ttl=self._cfg.PLAYBACK_GRANT_TTL,
            )

            token = self.tokens.create_access_token(
                identity=identity,
                grants=[PlaybackGrant(grant=playback_grant.grant)],
            )
        except Exception as e:
            logger.error(f"Failed to issue audience token: {format_error(e)}")
            raise LiveError(
                errcode=LiveErrorCode.E_TOKEN_SIGN_FAILED,
                errmesg="Unable to view livestream",
                status_code=LiveStatusCode.BAD_REQUEST,
            ) from e

        logger.info(f"Issued audience token for player_streamer={player_streamer.sid}")
        return AudienceTokenResult(token=token)
