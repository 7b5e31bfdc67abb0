from fastapi import APIRouter

from app.app_config import get_app_environ_config

from .utils import ApiSuccess


router = APIRouter()


@router.get('/health', response_model=ApiSuccess)
async def health():
    missing = get_app_environ_config().missing_twilio_credentials()
    return ApiSuccess(results={"status": "OK", "twilio_configured": not missing})
