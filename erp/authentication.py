"""
Token authentication for API clients.

Kept apart from the auth views so that DRF can import the class while
it initialises its settings without pulling in the views.  Listed
first in ``DEFAULT_AUTHENTICATION_CLASSES``: its ``WWW-Authenticate``
header is what turns anonymous API calls into 401 rather than 403.
"""
from __future__ import annotations

from rest_framework import authentication


class TokenAuthentication(authentication.TokenAuthentication):
    """``Authorization: Token <key>`` authentication."""

    keyword = 'Token'
