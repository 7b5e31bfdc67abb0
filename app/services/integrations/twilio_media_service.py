"""Twilio Video / Twilio Media helper service.

This module provides a thin wrapper around the Twilio Video Rooms API and the
Twilio Media PlayerStreamer / MediaProcessor APIs, called over HTTPS with
`httpx` and API-key basic auth.

Usage:
    service = TwilioMediaService()

    room = await service.create_room(unique_name="my-stream", room_type="go")
    streamer = await service.create_player_streamer()
    processor = await service.create_media_processor(
        extension="video-composer-v1-preview",
        room_sid=room.sid,
        player_streamer_sid=streamer.sid,
    )

    await service.close()
"""

from __future__ import annotations

from typing import Any

import httpx
import orjson
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from app.app_config import AppEnvironConfig, get_app_environ_config

PLAYER_STREAMER_STARTED = "STARTED"
PLAYER_STREAMER_ENDED = "ENDED"
MEDIA_PROCESSOR_ENDED = "ENDED"
ROOM_COMPLETED = "completed"


class TwilioApiError(Exception):
    """Non-2xx reply from a Twilio REST endpoint."""

    def __init__(self, status_code: int, message: str, code: int | None = None) -> None:
        self.status_code = status_code
        self.code = code
        self.message = message
        super().__init__(f"Twilio API error status={status_code} code={code}: {message}")


class TwilioConfigError(Exception):
    """Twilio credentials are not configured."""


class TwilioResource(BaseModel):
    model_config = ConfigDict(extra="ignore")

    sid: str
    status: str | None = None


class TwilioRoom(TwilioResource):
    unique_name: str | None = None
    type: str | None = None


class TwilioPlayerStreamer(TwilioResource):
    pass


class TwilioMediaProcessor(TwilioResource):
    extension: str | None = None


class TwilioPlayerStreamerList(BaseModel):
    model_config = ConfigDict(extra="ignore")

    player_streamers: list[TwilioPlayerStreamer] = Field(default_factory=list)


class TwilioPlaybackGrant(BaseModel):
    model_config = ConfigDict(extra="ignore")

    sid: str | None = None
    grant: dict[str, Any]


class TwilioMediaService:
    """Service wrapper for the Twilio Video and Twilio Media REST APIs.

    One instance owns one `httpx.AsyncClient` (connection pool). Build it once
    at startup and call `close()` on shutdown.
    """

    def __init__(
        self,
        cfg: AppEnvironConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._cfg = cfg or get_app_environ_config()
        self._video_base_url = self._cfg.TWILIO_VIDEO_BASE_URL.rstrip("/")
        self._media_base_url = self._cfg.TWILIO_MEDIA_BASE_URL.rstrip("/")
        self._client = http_client or httpx.AsyncClient(timeout=self._cfg.TWILIO_HTTP_TIMEOUT)
        logger.info("TwilioMediaService initialized")

    async def close(self) -> None:
        await self._client.aclose()

    def _get_auth(self) -> httpx.BasicAuth:
        """Build basic auth from the API key pair.

        Raises:
            TwilioConfigError: If the API key SID or secret is not configured
        """
        api_key = self._cfg.TWILIO_API_KEY_SID
        api_secret = self._cfg.TWILIO_API_KEY_SECRET
        if not api_key or not api_secret:
            logger.error("TWILIO_API_KEY_SID or TWILIO_API_KEY_SECRET not configured")
            raise TwilioConfigError(
                "Twilio credentials must be configured. Set them in env.local or environment variables."
            )
        return httpx.BasicAuth(api_key, api_secret)

    async def _request(
        self,
        method: str,
        url: str,
        *,
        data: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        auth = self._get_auth()
        logger.debug(f"Twilio request {method} {url}")
        response = await self._client.request(
            method,
            url,
            data=data,
            params=params,
            auth=auth,
        )

        if response.is_error:
            code = None
            message = response.reason_phrase
            try:
                body = response.json()
                code = body.get("code")
                message = body.get("message") or message
            except ValueError:
                pass
            logger.warning(
                f"Twilio request failed: {method} {url} status={response.status_code} code={code}"
            )
            raise TwilioApiError(response.status_code, message, code)

        return response.json()

    async def create_room(self, unique_name: str, room_type: str) -> TwilioRoom:
        """Create a Twilio Video room.

        Args:
            unique_name: Room unique name (the stream name)
            room_type: Room type, e.g. "go" or "group"

        Returns:
            TwilioRoom with the vendor-assigned sid

        Raises:
            TwilioApiError: If the API request fails
        """
        logger.info(f"Creating Twilio room: unique_name={unique_name}, type={room_type}")
        data = await self._request(
            "POST",
            f"{self._video_base_url}/v1/Rooms",
            data={"UniqueName": unique_name, "Type": room_type},
        )
        room = TwilioRoom.model_validate(data)
        logger.debug(f"Created Twilio room: sid={room.sid}")
        return room

    async def complete_room(self, room_sid: str) -> TwilioRoom:
        logger.info(f"Completing Twilio room: sid={room_sid}")
        data = await self._request(
            "POST",
            f"{self._video_base_url}/v1/Rooms/{room_sid}",
            data={"Status": ROOM_COMPLETED},
        )
        return TwilioRoom.model_validate(data)

    async def create_player_streamer(self) -> TwilioPlayerStreamer:
        logger.info("Creating Twilio player streamer")
        data = await self._request("POST", f"{self._media_base_url}/v1/PlayerStreamers")
        streamer = TwilioPlayerStreamer.model_validate(data)
        logger.debug(f"Created Twilio player streamer: sid={streamer.sid}")
        return streamer

    async def end_player_streamer(self, player_streamer_sid: str) -> TwilioPlayerStreamer:
        logger.info(f"Ending Twilio player streamer: sid={player_streamer_sid}")
        data = await self._request(
            "POST",
            f"{self._media_base_url}/v1/PlayerStreamers/{player_streamer_sid}",
            data={"Status": PLAYER_STREAMER_ENDED},
        )
        return TwilioPlayerStreamer.model_validate(data)

    async def list_player_streamers(
        self, status: str = PLAYER_STREAMER_STARTED
    ) -> list[TwilioPlayerStreamer]:
        """List player streamers in the given status, in vendor order."""
        logger.debug(f"Listing Twilio player streamers: status={status}")
        data = await self._request(
            "GET",
            f"{self._media_base_url}/v1/PlayerStreamers",
            params={"Status": status},
        )
        return TwilioPlayerStreamerList.model_validate(data).player_streamers

    async def create_playback_grant(
        self, player_streamer_sid: str, ttl: int
    ) -> TwilioPlaybackGrant:
        """Request a short-lived playback grant for a player streamer.

        Args:
            player_streamer_sid: Player streamer to grant playback against
            ttl: Requested grant lifetime in seconds

        Returns:
            TwilioPlaybackGrant whose `grant` is the opaque payload to embed
            in an access token

        Raises:
            TwilioApiError: If the API request fails
        """
        logger.info(f"Creating playback grant: player_streamer={player_streamer_sid}, ttl={ttl}")
        data = await self._request(
            "POST",
            f"{self._media_base_url}/v1/PlayerStreamers/{player_streamer_sid}/PlaybackGrant",
            data={"Ttl": ttl},
        )
        return TwilioPlaybackGrant.model_validate(data)

    async def create_media_processor(
        self,
        extension: str,
        room_sid: str,
        player_streamer_sid: str,
    ) -> TwilioMediaProcessor:
        """Create a media processor compositing a room into a player streamer.

        Args:
            extension: Media extension identifier, e.g. "video-composer-v1-preview"
            room_sid: Source room sid
            player_streamer_sid: Output player streamer sid

        Raises:
            TwilioApiError: If the API request fails
        """
        extension_context = {
            "room": {"name": room_sid},
            "outputs": [player_streamer_sid],
        }
        logger.info(
            f"Creating Twilio media processor: extension={extension}, room={room_sid}, output={player_streamer_sid}"
        )
        data = await self._request(
            "POST",
            f"{self._media_base_url}/v1/MediaProcessors",
            data={
                "Extension": extension,
                "ExtensionContext": orjson.dumps(extension_context).decode(),
            },
        )
        processor = TwilioMediaProcessor.model_validate(data)
        logger.debug(f"Created Twilio media processor: sid={processor.sid}")
        return processor

    async def end_media_processor(self, media_processor_sid: str) -> TwilioMediaProcessor:
        logger.info(f"Ending Twilio media processor: sid={media_processor_sid}")
        data = await self._request(
            "POST",
            f"{self._media_base_url}/v1/MediaProcessors/{media_processor_sid}",
            data={"Status": MEDIA_PROCESSOR_ENDED},
        )
        return TwilioMediaProcessor.model_validate(data)
