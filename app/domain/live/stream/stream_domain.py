"""Livestream start/end orchestration.

A livestream is three Twilio resources created in dependency order:

    room -> player streamer -> media processor (room in, player streamer out)

and torn down in reverse order. Nothing is persisted locally.
"""

from collections.abc import Awaitable, Callable

from loguru import logger

from app.app_config import AppEnvironConfig, get_app_environ_config
from app.services.integrations.twilio_media_service import TwilioMediaService
from app.shared.api.utils import format_error
from app.utils.live_errors import LiveError, LiveErrorCode, LiveStatusCode

from .stream_models import EndStreamResult, StreamSession

Compensation = tuple[str, Callable[[], Awaitable[object]]]


class StreamService:
    """Starts and ends livestreams against the Twilio APIs."""

    def __init__(
        self,
        media: TwilioMediaService,
        cfg: AppEnvironConfig | None = None,
    ) -> None:
        self.media = media
        self._cfg = cfg or get_app_environ_config()

    async def start_stream(self, stream_name: str) -> StreamSession:
        """Create the room, player streamer and media processor for a stream.

        The stream name is passed to Twilio as-is; an empty name surfaces as a
        creation failure from the vendor.

        If any step fails, the steps that already succeeded are undone in
        reverse order (player streamer ended, room completed) before the
        error is raised. Later steps are never attempted.

        Args:
            stream_name: Unique room name for the livestream

        Returns:
            StreamSession with all vendor identifiers

        Raises:
            LiveError: E_STREAM_CREATE_FAILED if any step fails
        """
        compensations: list[Compensation] = []

        try:
            room = await self.media.create_room(
                unique_name=stream_name,
                room_type=self._cfg.TWILIO_ROOM_TYPE,
            )
            compensations.append(
                (f"complete room {room.sid}", lambda: self.media.complete_room(room.sid))
            )

            streamer = await self.media.create_player_streamer()
            compensations.append(
                (
                    f"end player streamer {streamer.sid}",
                    lambda: self.media.end_player_streamer(streamer.sid),
                )
            )

            processor = await self.media.create_media_processor(
                extension=self._cfg.TWILIO_COMPOSER_EXTENSION,
                room_sid=room.sid,
                player_streamer_sid=streamer.sid,
            )
        except Exception as e:
            logger.error(f"Failed to create livestream {stream_name!r}: {format_error(e)}")
            await self._compensate(stream_name, compensations)
            raise LiveError(
                errcode=LiveErrorCode.E_STREAM_CREATE_FAILED,
                errmesg="Unable to create livestream",
                status_code=LiveStatusCode.BAD_REQUEST,
            ) from e

        session = StreamSession(
            stream_name=stream_name,
            room_id=room.sid,
            player_streamer_id=streamer.sid,
            media_processor_id=processor.sid,
        )
        logger.info(
            f"Started livestream {stream_name!r}: room={session.room_id}, "
            f"player_streamer={session.player_streamer_id}, media_processor={session.media_processor_id}"
        )
        return session

    async def _compensate(self, stream_name: str, compensations: list[Compensation]) -> None:
        for description, undo in reversed(compensations):
            try:
                await undo()
                logger.info(f"Rolled back livestream {stream_name!r}: {description}")
            except Exception as e:
                # Original creation error is what the caller sees
                logger.warning(
                    f"Rollback step failed for livestream {stream_name!r}: {description}: {e!s}"
                )

    async def end_stream(self, session: StreamSession) -> EndStreamResult:
        """End the media processor, then the player streamer, then complete the room.

        Transitions that succeeded before a failure are not undone, so a
        failed call can leave the resources in a mixed state. Ending the same
        session twice depends on Twilio accepting the repeated transition.

        Raises:
            LiveError: E_STREAM_END_FAILED if any transition fails
        """
        try:
            await self.media.end_media_processor(session.media_processor_id)
            await self.media.end_player_streamer(session.player_streamer_id)
            await self.media.complete_room(session.room_id)
        except Exception as e:
            logger.error(f"Failed to end livestream {session.stream_name!r}: {format_error(e)}")
            raise LiveError(
                errcode=LiveErrorCode.E_STREAM_END_FAILED,
                errmesg="Unable to end stream",
                status_code=LiveStatusCode.BAD_REQUEST,
            ) from e

        logger.info(f"Ended livestream {session.stream_name!r}")
        return EndStreamResult(
            stream_name=session.stream_name,
            message=f"Successfully ended stream {session.stream_name}",
        )
