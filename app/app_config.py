from pydantic import BaseModel

from app.shared.config import config


class AppEnvironConfig(BaseModel):
    DEBUG: bool = config.get_bool("DEBUG")

    # Server configuration
    API_HOST: str = (config.get("API_HOST") or "0.0.0.0").strip()
    API_PORT: int = config.get_positive_int("API_PORT", 5000)
    API_WORKERS: int = config.get_positive_int("API_WORKERS", 1)
    API_CORS_ORIGINS: list[str] = config.get_list("API_CORS_ORIGINS", ["*"])

    # Observability
    LOGFIRE_ENABLE: bool = config.get_bool("LOGFIRE_ENABLE")
    LOGFIRE_TOKEN: str | None = (config.get("LOGFIRE_TOKEN") or "").strip() or None

    # Twilio credentials
    TWILIO_ACCOUNT_SID: str | None = (config.get("TWILIO_ACCOUNT_SID") or "").strip() or None
    TWILIO_API_KEY_SID: str | None = (config.get("TWILIO_API_KEY_SID") or "").strip() or None
    TWILIO_API_KEY_SECRET: str | None = (config.get("TWILIO_API_KEY_SECRET") or "").strip() or None

    # Twilio endpoints
    TWILIO_VIDEO_BASE_URL: str = (
        config.get("TWILIO_VIDEO_BASE_URL") or "https://video.twilio.com"
    ).strip()
    TWILIO_MEDIA_BASE_URL: str = (
        config.get("TWILIO_MEDIA_BASE_URL") or "https://media.twilio.com"
    ).strip()
    # Seconds, applied to every vendor call
    TWILIO_HTTP_TIMEOUT: int = config.get_positive_int("TWILIO_HTTP_TIMEOUT", 30)

    # Livestream composition
    # "go" rooms are routed through Twilio media servers, which the composer needs
    TWILIO_ROOM_TYPE: str = (config.get("TWILIO_ROOM_TYPE") or "go").strip()
    TWILIO_COMPOSER_EXTENSION: str = (
        config.get("TWILIO_COMPOSER_EXTENSION") or "video-composer-v1-preview"
    ).strip()

    # Token lifetimes in seconds
    PLAYBACK_GRANT_TTL: int = config.get_positive_int("PLAYBACK_GRANT_TTL", 60)
    ACCESS_TOKEN_TTL: int = config.get_positive_int("ACCESS_TOKEN_TTL", 3600)

    def missing_twilio_credentials(self) -> list[str]:
        return [
            key
            for key in ("TWILIO_ACCOUNT_SID", "TWILIO_API_KEY_SID", "TWILIO_API_KEY_SECRET")
            if not getattr(self, key)
        ]


_app_environ_config = AppEnvironConfig()


def get_app_environ_config() -> AppEnvironConfig:
    return _app_environ_config
