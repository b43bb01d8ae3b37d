"""
Custom authentication backend for token-based auth.

This module defines a subclass of Django REST framework's
``TokenAuthentication`` that pins the ``keyword`` used in the
``Authorization`` header.  By keeping this logic separate from any
view definitions we avoid circular import issues when the REST
framework imports authentication classes during initialization.
"""
from __future__ import annotations

from rest_framework import authentication


class TokenAuthentication(authentication.TokenAuthentication):
    """Token authentication using the ``Token`` keyword.

    Listed first in ``DEFAULT_AUTHENTICATION_CLASSES`` so that 401
    responses advertise ``WWW-Authenticate: Token``.  JWT bearer tokens
    issued at sign-in are accepted by simplejwt's class after this one.
    """

    keyword = 'Token'
