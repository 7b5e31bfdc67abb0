import time
import traceback
import uuid
from contextlib import asynccontextmanager
from os import environ

import logfire
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from fastapi.staticfiles import StaticFiles
from granian import Granian
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from app.api.live.errors import live_error_handler, live_failure
from app.api.live.routers import pages, stream, token
from app.app_config import get_app_environ_config
from app.domain.live.stream.stream_domain import StreamService
from app.domain.live.token.token_domain import TokenService
from app.services.integrations.twilio_media_service import TwilioMediaService
from app.services.integrations.twilio_token_service import TwilioTokenService
from app.shared.api import health
from app.shared.api.utils import init_logger, log_routes
from app.utils.live_errors import LiveError, LiveErrorCode, LiveStatusCode

cfg = get_app_environ_config()


class HTTPLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):  # type: ignore
        start_time = time.time()
        request_id = str(uuid.uuid4())[:8]

        logger.info(f"[{request_id}] {request.method} {request.url.path}")

        try:
            response = await call_next(request)

            process_time = (time.time() - start_time) * 1000
            logger.info(
                f"[{request_id}] {request.method} {request.url.path} - "
                f"Status: {response.status_code} - "
                f"Duration: {process_time:.2f}ms"
            )

            return response

        except Exception as exc:
            process_time = (time.time() - start_time) * 1000
            logger.error(
                f"[{request_id}] Unhandled exception in {request.method} {request.url.path} - "
                f"Duration: {process_time:.2f}ms - "
                f"Error: {type(exc).__name__}: {exc}\n"
                f"Traceback:\n{traceback.format_exc()}"
            )

            failure = live_failure(
                LiveError(
                    errcode=LiveErrorCode.E_INTERNAL_ERROR,
                    errmesg=f"Internal server error (request_id: {request_id})",
                    status_code=LiveStatusCode.INTERNAL_SERVER_ERROR,
                )
            )
            return ORJSONResponse(status_code=500, content=failure.model_dump())


async def app_validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()

    logger.warning(
        "Validation error: path={} method={} errors={}",
        request.url.path,
        request.method,
        errors,
    )

    failure = live_failure(
        LiveError(
            errcode=LiveErrorCode.E_INVALID_REQUEST,
            errmesg="Invalid request parameters",
            status_code=LiveStatusCode.BAD_REQUEST,
        )
    )
    return ORJSONResponse(status_code=400, content=failure.model_dump())


@asynccontextmanager
async def lifespan(server: FastAPI):
    init_logger(cfg.DEBUG)

    logger.info("Application startup...")

    missing = cfg.missing_twilio_credentials()
    if missing:
        logger.warning(
            "Twilio credentials not configured: {}. Stream and token endpoints will fail until they are set.",
            ", ".join(missing),
        )

    media = TwilioMediaService(cfg)
    server.state.stream_service = StreamService(media, cfg)
    server.state.token_service = TokenService(media, TwilioTokenService(cfg), cfg)

    log_routes(server)

    if cfg.LOGFIRE_ENABLE:
        logger.info("Logfire initializing")

        logfire.configure(
            token=cfg.LOGFIRE_TOKEN,
            service_name="twilio-livestream",
            service_version=environ.get("BUILD_COMMIT") or "dev",
        )

        logger.info("Logfire instrument fastapi")
        logfire.instrument_fastapi(server, capture_headers=True)

        logger.info("Logfire instrument httpx")
        logfire.instrument_httpx()

    yield

    logger.info("Application shutdown...")

    await media.close()


app = FastAPI(
    version="1.0",
    title="Twilio Livestream API",
    docs_url="/docs" if cfg.DEBUG else None,
    redoc_url=None,
    openapi_url="/openapi.json" if cfg.DEBUG else None,
    default_response_class=ORJSONResponse,
    lifespan=lifespan,
)

app.add_middleware(HTTPLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,  # type: ignore
    allow_origins=cfg.API_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(RequestValidationError, app_validation_exception_handler)  # type: ignore
app.add_exception_handler(LiveError, live_error_handler)  # type: ignore

app.include_router(health.router)
app.include_router(stream.router)
app.include_router(token.router)
app.include_router(pages.router)

# Remaining public/ assets (scripts, styles) are served from the site root
app.mount("/", StaticFiles(directory=pages.PUBLIC_DIR), name="public")


def build_granian_kwargs():
    kwargs = {
        "interface": "asgi",
        "address": cfg.API_HOST,
        "port": cfg.API_PORT,
        "workers": cfg.API_WORKERS,
        "reload": cfg.DEBUG,
    }

    return kwargs


if __name__ == "__main__":
    granian_kwargs = build_granian_kwargs()
    Granian("app.main:app", **granian_kwargs).serve()
