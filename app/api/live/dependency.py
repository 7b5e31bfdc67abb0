from fastapi import Request

from app.domain.live.stream.stream_domain import StreamService
from app.domain.live.token.token_domain import TokenService


def get_stream_service(request: Request) -> StreamService:
    """StreamService built once in the application lifespan."""
    return request.app.state.stream_service


def get_token_service(request: Request) -> TokenService:
    """TokenService built once in the application lifespan."""
    return request.app.state.token_service
