# backend/tracker/authentication.py
from rest_framework.authentication import TokenAuthentication


class BearerTokenAuthentication(TokenAuthentication):
    """DRF token auth, read from an `Authorization: Bearer <token>` header."""

    keyword = "Bearer"
