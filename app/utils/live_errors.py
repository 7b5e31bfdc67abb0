import inspect
from enum import Enum, IntEnum
from uuid import uuid4


class LiveErrorCode(str, Enum):
    """Closed set of error kinds surfaced to clients."""

    E_INVALID_REQUEST = "E_INVALID_REQUEST"
    E_STREAM_CREATE_FAILED = "E_STREAM_CREATE_FAILED"
    E_STREAM_END_FAILED = "E_STREAM_END_FAILED"
    E_TOKEN_SIGN_FAILED = "E_TOKEN_SIGN_FAILED"
    E_INTERNAL_ERROR = "E_INTERNAL_ERROR"


class LiveStatusCode(IntEnum):
    BAD_REQUEST = 400
    INTERNAL_SERVER_ERROR = 500


class LiveError(Exception):
    """Domain error rendered to the client as ``{message, error}``.

    ``errmesg`` is the client-visible message and must never carry raw vendor
    payloads. The underlying exception, if any, is logged next to ``erresid``
    so a client report can be matched with the server log.
    """

    def __init__(
        self,
        errcode: LiveErrorCode | str,
        errmesg: str,
        status_code: int = LiveStatusCode.BAD_REQUEST,
    ) -> None:
        self.errcode = errcode.value if isinstance(errcode, LiveErrorCode) else errcode
        self.errmesg = errmesg
        self.status_code = int(status_code)
        self.erresid = uuid4().hex[:10]

        caller_frame = inspect.stack()[1]
        module = inspect.getmodule(caller_frame.frame)
        module_name = (
            module.__name__
            if module and getattr(module, "__name__", None)
            else caller_frame.filename
        )
        self.caller_info = f"{module_name}:{caller_frame.function}:{caller_frame.lineno}"

        super().__init__(f"{self.errcode}: {errmesg}")
