"""
Domain layer containing core business logic and domain services.

Submodules:
- live: Livestream lifecycle and access token issuance.
"""
