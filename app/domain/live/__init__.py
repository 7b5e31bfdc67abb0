"""
Livestream domain logic.

Includes:
- stream: Start/end orchestration of the Twilio room, player streamer and media processor.
- token: Streamer and audience access tokens.
"""
