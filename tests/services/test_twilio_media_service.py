"""Tests for TwilioMediaService against a fake Twilio API."""

import json

import httpx
import pytest

from app.app_config import AppEnvironConfig
from app.services.integrations.twilio_media_service import (
    TwilioApiError,
    TwilioConfigError,
    TwilioMediaService,
)
from tests.fixtures.twilio_fixtures import (
    TEST_API_KEY_SECRET,
    TEST_API_KEY_SID,
    FakeTwilioApi,
    basic_auth_header,
)


class TestRooms:
    async def test_create_room_posts_unique_name_and_type(
        self, media_service: TwilioMediaService, fake_twilio: FakeTwilioApi
    ):
        """Should form-encode UniqueName and Type to the Video Rooms endpoint."""
        room = await media_service.create_room(unique_name="room-A", room_type="go")

        assert room.sid.startswith("RM")
        assert room.unique_name == "room-A"

        request = fake_twilio.requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://video.twilio.test/v1/Rooms"
        assert request.headers["content-type"] == "application/x-www-form-urlencoded"
        assert fake_twilio.form(request) == {"UniqueName": "room-A", "Type": "go"}

    async def test_requests_use_api_key_basic_auth(
        self, media_service: TwilioMediaService, fake_twilio: FakeTwilioApi
    ):
        """Should authenticate every call with the API key pair."""
        await media_service.create_room(unique_name="room-A", room_type="go")

        assert fake_twilio.requests[0].headers["authorization"] == basic_auth_header(
            TEST_API_KEY_SID, TEST_API_KEY_SECRET
        )

    async def test_complete_room(
        self, media_service: TwilioMediaService, fake_twilio: FakeTwilioApi
    ):
        """Should post Status=completed to the room resource."""
        room = await media_service.create_room(unique_name="room-A", room_type="go")

        completed = await media_service.complete_room(room.sid)

        assert completed.status == "completed"
        request = fake_twilio.requests[-1]
        assert request.url.path == f"/v1/Rooms/{room.sid}"
        assert fake_twilio.form(request) == {"Status": "completed"}


class TestPlayerStreamers:
    async def test_create_player_streamer_has_no_parameters(
        self, media_service: TwilioMediaService, fake_twilio: FakeTwilioApi
    ):
        streamer = await media_service.create_player_streamer()

        assert streamer.sid.startswith("VJ")
        request = fake_twilio.requests[0]
        assert str(request.url) == "https://media.twilio.test/v1/PlayerStreamers"
        assert request.content == b""

    async def test_list_player_streamers_filters_by_status(
        self, media_service: TwilioMediaService, fake_twilio: FakeTwilioApi
    ):
        """Should query Status=STARTED and keep vendor order."""
        fake_twilio.player_streamers = {
            "VJ1": "STARTED",
            "VJ2": "ENDED",
            "VJ3": "STARTED",
        }

        streamers = await media_service.list_player_streamers()

        assert [s.sid for s in streamers] == ["VJ1", "VJ3"]
        request = fake_twilio.requests[0]
        assert request.method == "GET"
        assert request.url.params["Status"] == "STARTED"

    async def test_list_player_streamers_empty(self, media_service: TwilioMediaService):
        assert await media_service.list_player_streamers() == []

    async def test_create_playback_grant_sends_ttl(
        self, media_service: TwilioMediaService, fake_twilio: FakeTwilioApi
    ):
        """Should post Ttl and return the opaque grant payload."""
        fake_twilio.player_streamers = {"VJ1": "STARTED"}

        grant = await media_service.create_playback_grant("VJ1", ttl=60)

        request = fake_twilio.requests[0]
        assert request.url.path == "/v1/PlayerStreamers/VJ1/PlaybackGrant"
        assert fake_twilio.form(request) == {"Ttl": "60"}
        assert grant.grant["playerStreamerSid"] == "VJ1"

    async def test_end_player_streamer(
        self, media_service: TwilioMediaService, fake_twilio: FakeTwilioApi
    ):
        streamer = await media_service.create_player_streamer()

        ended = await media_service.end_player_streamer(streamer.sid)

        assert ended.status == "ENDED"
        assert fake_twilio.form(fake_twilio.requests[-1]) == {"Status": "ENDED"}


class TestMediaProcessors:
    async def test_create_media_processor_references_room_and_output(
        self, media_service: TwilioMediaService, fake_twilio: FakeTwilioApi
    ):
        """Should send the extension and a JSON context naming room and output."""
        processor = await media_service.create_media_processor(
            extension="video-composer-v1-preview",
            room_sid="RM1",
            player_streamer_sid="VJ1",
        )

        assert processor.sid.startswith("ZX")
        form = fake_twilio.form(fake_twilio.requests[0])
        assert form["Extension"] == "video-composer-v1-preview"
        assert json.loads(form["ExtensionContext"]) == {
            "room": {"name": "RM1"},
            "outputs": ["VJ1"],
        }

    async def test_end_media_processor(
        self, media_service: TwilioMediaService, fake_twilio: FakeTwilioApi
    ):
        processor = await media_service.create_media_processor(
            extension="video-composer-v1-preview",
            room_sid="RM1",
            player_streamer_sid="VJ1",
        )

        ended = await media_service.end_media_processor(processor.sid)

        assert ended.status == "ENDED"
        assert fake_twilio.requests[-1].url.path == f"/v1/MediaProcessors/{processor.sid}"


class TestErrors:
    async def test_error_reply_raises_twilio_api_error(
        self, media_service: TwilioMediaService, fake_twilio: FakeTwilioApi
    ):
        """Should parse the Twilio error body into TwilioApiError."""
        fake_twilio.fail("POST", "/v1/Rooms", status_code=400)

        with pytest.raises(TwilioApiError) as exc_info:
            await media_service.create_room(unique_name="room-A", room_type="go")

        assert exc_info.value.status_code == 400
        assert exc_info.value.code == 20001
        assert "Injected failure" in exc_info.value.message

    async def test_non_json_error_reply(self, app_cfg: AppEnvironConfig):
        """Should fall back to the reason phrase when the body is not JSON."""
        transport = httpx.MockTransport(lambda request: httpx.Response(503, text="down"))
        service = TwilioMediaService(app_cfg, http_client=httpx.AsyncClient(transport=transport))

        with pytest.raises(TwilioApiError) as exc_info:
            await service.create_player_streamer()

        assert exc_info.value.status_code == 503
        assert exc_info.value.code is None
        await service.close()

    async def test_missing_credentials_raise_before_any_request(
        self, fake_twilio: FakeTwilioApi
    ):
        cfg = AppEnvironConfig(
            TWILIO_ACCOUNT_SID=None,
            TWILIO_API_KEY_SID=None,
            TWILIO_API_KEY_SECRET=None,
        )
        service = TwilioMediaService(
            cfg,
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(fake_twilio.handler)),
        )

        with pytest.raises(TwilioConfigError):
            await service.create_room(unique_name="room-A", room_type="go")

        assert fake_twilio.requests == []
        await service.close()
