"""
Per-request session context.

``SessionContext`` is the explicit, request-scoped replacement for a
global auth state.  It starts in ``loading`` and moves to
``authenticated`` or ``unauthenticated`` when the session is known.
Route guards must treat ``loading`` as "no decision yet".

Sign-in issues both a DRF token (``Authorization: Token ...``) and a
simplejwt access/refresh pair (``Authorization: Bearer ...``).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from django.contrib.auth import authenticate, get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from rest_framework.authtoken.models import Token
from rest_framework.exceptions import ValidationError as DRFValidation
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken

from core.exceptions import AccountExists, SignInFailed
from core.models import Profile
from core.services.audit import log_action

User = get_user_model()
logger = logging.getLogger(__name__)

DASHBOARD_ROUTES = {
    'donor': '/donor/dashboard',
    'hospital': '/hospital/dashboard',
}


class SessionState(str, Enum):
    LOADING = 'loading'
    AUTHENTICATED = 'authenticated'
    UNAUTHENTICATED = 'unauthenticated'


def dashboard_for(profile: Optional[Profile]) -> Optional[str]:
    return DASHBOARD_ROUTES.get(getattr(profile, 'type', None))


@dataclass
class SignInResult:
    user: User
    token: str
    jwt_access: str
    jwt_refresh: str
    profile: Optional[Profile] = None

    @property
    def dashboard(self) -> Optional[str]:
        return dashboard_for(self.profile)


class SessionContext:
    def __init__(self, *, ip: Optional[str] = None):
        self.state = SessionState.LOADING
        self.user = None
        self.token = None
        self.ip = ip

    @classmethod
    def from_request(cls, request) -> 'SessionContext':
        ctx = cls(ip=request.META.get('REMOTE_ADDR'))
        user = getattr(request, 'user', None)
        if user is not None and getattr(user, 'is_authenticated', False):
            ctx.on_session_change(user, token=getattr(request, 'auth', None))
        else:
            ctx.on_session_change(None)
        return ctx

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    def on_session_change(self, user, token=None) -> None:
        if user is None:
            self.user = None
            self.token = None
            self.state = SessionState.UNAUTHENTICATED
        else:
            self.user = user
            self.token = token
            self.state = SessionState.AUTHENTICATED

    @property
    def is_pending(self) -> bool:
        return self.state is SessionState.LOADING

    @property
    def is_authenticated(self) -> bool:
        return self.state is SessionState.AUTHENTICATED

    @property
    def profile(self) -> Optional[Profile]:
        if self.user is None:
            return None
        return Profile.objects.filter(user_id=self.user.pk).first()

    def as_dict(self) -> dict:
        data: dict[str, object] = {'state': self.state.value, 'user': None, 'profileType': None, 'dashboard': None}
        if self.user is not None:
            profile = self.profile
            data['user'] = {'id': self.user.pk, 'email': self.user.email}
            data['profileType'] = getattr(profile, 'type', None)
            data['dashboard'] = dashboard_for(profile)
        return data

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def sign_in(self, email: str, password: str) -> SignInResult:
        user = authenticate(username=email, password=password)
        if user is None:
            log_action(user=None, action='login', object_type='user', object_id=None,
                       detail={'result': 'fail', 'email': email, 'ip': self.ip})
            self.on_session_change(None)
            raise SignInFailed()

        token_obj, _ = Token.objects.get_or_create(user=user)
        refresh = RefreshToken.for_user(user)
        self.on_session_change(user, token=token_obj)
        log_action(user=user, action='login', object_type='user', object_id=user.pk,
                   detail={'result': 'ok', 'ip': self.ip})
        return SignInResult(
            user=user,
            token=token_obj.key,
            jwt_access=str(refresh.access_token),
            jwt_refresh=str(refresh),
            profile=self.profile,
        )

    def sign_up(self, *, email: str, password: str, type: str, name: str, contact: str,
                address: str, blood_type: Optional[str] = None) -> Profile:
        """Create the account and its profile together.

        The session stays unauthenticated; the client signs in afterwards.
        """
        if User.objects.filter(email__iexact=email).exists():
            raise AccountExists()
        try:
            validate_password(password, user=User(email=email, username=email[:150]))
        except ValidationError as e:
            raise DRFValidation({'password': e.messages})

        try:
            with transaction.atomic():
                user = User.objects.create_user(username=email[:150], email=email, password=password)
                profile = Profile.objects.create(
                    user=user,
                    type=type,
                    name=name,
                    contact=contact,
                    address=address,
                    blood_type=blood_type if type == 'donor' else None,
                )
        except IntegrityError:
            raise AccountExists()

        log_action(user=user, action='signup', object_type='profile', object_id=profile.id,
                   detail={'type': type, 'ip': self.ip})
        self.on_session_change(None)
        return profile

    def sign_out(self, refresh: Optional[str] = None) -> int:
        """Revoke credentials and drop to ``unauthenticated`` from any state.

        Returns the number of refresh tokens blacklisted.
        """
        user = self.user
        count = 0
        if user is not None:
            Token.objects.filter(user=user).delete()
            if refresh:
                try:
                    token = RefreshToken(refresh)
                    if str(token.get('user_id')) == str(user.pk):
                        token.blacklist()
                        count = 1
                except TokenError as e:
                    logger.info('refresh token not blacklisted for user %s: %s', user.pk, e)
            else:
                for outstanding in OutstandingToken.objects.filter(user=user):
                    _, created = BlacklistedToken.objects.get_or_create(token=outstanding)
                    count += int(created)
            log_action(user=user, action='logout', object_type='user', object_id=user.pk,
                       detail={'blacklisted': count})
        self.on_session_change(None)
        return count
