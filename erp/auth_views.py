"""
Authentication endpoints.

Login accepts a username and password, opens a Django session for the
browser client and also returns a DRF token and a JWT pair for API
clients.  Passwords are checked against Django's salted hashes through
``authenticate``.  Kept apart from ``erp.authentication`` to avoid
circular imports while DRF initialises.
"""
from __future__ import annotations

import logging

from django.contrib.auth import authenticate, login, logout
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from rest_framework_simplejwt.tokens import RefreshToken

from .serializers.auth import LoginSerializer, UserSerializer
from .services.audit import log_action

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    username = s.validated_data['username']
    ip = request.META.get('REMOTE_ADDR')

    user = authenticate(request, username=username, password=s.validated_data['password'])
    if not user:
        # Only the attempted username is recorded
        logger.warning("Failed login for %r from %s", username, ip)
        log_action(user=None, action='login', object_type='user',
                   detail={'result': 'fail', 'username': username, 'ip': ip})
        raise ValidationError('Invalid username or password')

    login(request, user)
    token_obj, _ = Token.objects.get_or_create(user=user)
    refresh = RefreshToken.for_user(user)
    log_action(user=user, action='login', object_type='user', object_id=user.id,
               detail={'result': 'ok', 'ip': ip})

    return Response({
        'ok': True,
        'user': UserSerializer(user).data,
        'token': token_obj.key,
        'jwtAccess': str(refresh.access_token),
        'jwtRefresh': str(refresh),
    })

# ScopedRateThrottle reads throttle_scope from the view class
login_view.cls.throttle_scope = 'login'


@api_view(['POST'])
@permission_classes([AllowAny])
def logout_view(request):
    """End the session, drop the DRF token and blacklist a refresh token if given."""
    user = request.user
    refresh = request.data.get('refresh')
    if refresh:
        try:
            RefreshToken(refresh).blacklist()
        except TokenError as exc:
            logger.info("Ignoring invalid refresh token on logout: %s", exc)
    if user.is_authenticated:
        Token.objects.filter(user=user).delete()
        log_action(user=user, action='logout', object_type='user', object_id=user.id)
    logout(request)
    return Response({'ok': True})


@api_view(['GET'])
@permission_classes([AllowAny])
def session_view(request):
    user = request.user
    if not user.is_authenticated:
        return Response({'authenticated': False, 'user': None})
    return Response({'authenticated': True, 'user': UserSerializer(user).data})


@api_view(['POST'])
@permission_classes([AllowAny])
def refresh_view(request):
    """Return a new access token from a refresh token."""
    s = TokenRefreshSerializer(data={'refresh': request.data.get('refresh') or request.data.get('jwtRefresh')})
    try:
        s.is_valid(raise_exception=True)
    except TokenError as exc:
        raise InvalidToken(exc.args[0])
    data = {'ok': True, 'jwtAccess': s.validated_data['access']}
    if 'refresh' in s.validated_data:
        data['jwtRefresh'] = s.validated_data['refresh']
    return Response(data)
