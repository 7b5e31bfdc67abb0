from fastapi import Request
from fastapi.responses import ORJSONResponse
from loguru import logger
from pydantic import BaseModel

from app.utils.live_errors import LiveError, LiveErrorCode


class LiveErrorDetail(BaseModel):
    errcode: str
    erresid: str


class LiveFailure(BaseModel):
    """Client-visible failure body: a readable message plus a log correlation id."""

    message: str
    error: LiveErrorDetail


def live_failure(exc: LiveError) -> LiveFailure:
    return LiveFailure(
        message=exc.errmesg,
        error=LiveErrorDetail(errcode=exc.errcode, erresid=exc.erresid),
    )


async def live_error_handler(request: Request, exc: LiveError) -> ORJSONResponse:
    """
    Custom exception handler for LiveError.
    The underlying cause is logged here and never returned to the client.
    """
    log_msg = (
        f"{exc.errcode} {exc.erresid} path={request.url.path} "
        f"msg={exc.errmesg} caller={exc.caller_info}"
    )
    if exc.__cause__ is not None:
        log_msg += f" cause={type(exc.__cause__).__name__}: {exc.__cause__}"

    if exc.errcode == LiveErrorCode.E_INTERNAL_ERROR.value:
        logger.error(log_msg)
    else:
        logger.warning(log_msg)

    return ORJSONResponse(status_code=exc.status_code, content=live_failure(exc).model_dump())
