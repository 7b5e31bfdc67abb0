"""Twilio Access Token helper.

Thin wrapper around `twilio.jwt.access_token.AccessToken` that binds the
account sid and API key from config.

Usage:
    from twilio.jwt.access_token.grants import VideoGrant

    token = TwilioTokenService().create_access_token(
        identity="streamer-1",
        grants=[VideoGrant(room="my-stream")],
    )
"""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger
from twilio.jwt.access_token import AccessToken, AccessTokenGrant

from app.app_config import AppEnvironConfig, get_app_environ_config
from app.services.integrations.twilio_media_service import TwilioConfigError


class TwilioTokenService:
    def __init__(self, cfg: AppEnvironConfig | None = None) -> None:
        self._cfg = cfg or get_app_environ_config()

    def create_access_token(
        self,
        identity: str,
        grants: Sequence[AccessTokenGrant],
        ttl: int | None = None,
    ) -> str:
        """Create and return a signed Twilio Access Token.

        Args:
            identity: Identity claim bound to the token
            grants: SDK grants to embed (`VideoGrant`, `PlaybackGrant`)
            ttl: Lifetime in seconds (default: ACCESS_TOKEN_TTL)

        Returns:
            JWT token string

        Raises:
            TwilioConfigError: If account sid, API key sid or secret is missing
        """
        account_sid = self._cfg.TWILIO_ACCOUNT_SID
        api_key = self._cfg.TWILIO_API_KEY_SID
        api_secret = self._cfg.TWILIO_API_KEY_SECRET

        if not account_sid or not api_key or not api_secret:
            logger.error("TWILIO_ACCOUNT_SID, TWILIO_API_KEY_SID or TWILIO_API_KEY_SECRET not configured")
            raise TwilioConfigError(
                "Twilio credentials must be configured. Set them in env.local or environment variables."
            )

        token = AccessToken(
            account_sid,
            api_key,
            api_secret,
            identity=identity,
            ttl=ttl if ttl is not None else self._cfg.ACCESS_TOKEN_TTL,
        )
        for grant in grants:
            token.add_grant(grant)

        logger.debug(
            f"Creating access token for identity={identity}, grants={[g.key for g in grants]}"
        )
        return token.to_jwt()
