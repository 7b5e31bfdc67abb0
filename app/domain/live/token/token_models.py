"""Token domain models."""

from pydantic import BaseModel

NO_ONE_STREAMING_MESSAGE = "No one is streaming right now"


class AudienceTokenResult(BaseModel):
    """Either a signed token, or a notice when nothing is live."""

    token: str | None = None
    message: str | None = None

    @property
    def is_live(self) -> bool:
        return self.token is not None
