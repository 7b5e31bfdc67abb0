import os

# Must be set before any `app` module builds its config
os.environ.update(
    {
        "DEBUG": "false",
        "API_PORT": "5000",
        "LOGFIRE_ENABLE": "false",
        "TWILIO_ACCOUNT_SID": "ACenv0000000000000000000000000000",
        "TWILIO_API_KEY_SID": "SKenv0000000000000000000000000000",
        "TWILIO_API_KEY_SECRET": "env-api-key-secret-0123456789abcdef",
    }
)

# Import Twilio fixtures so they are available to all tests
from tests.fixtures.twilio_fixtures import *  # noqa: E402, F403
