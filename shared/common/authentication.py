# shared/common/authentication.py
"""
Gateway Header and JWT Authentication

Callers are authenticated upstream by the API gateway, which forwards the
user id in ``X-User-ID``. Direct callers may present a bearer JWT whose
``sub`` claim is the user id. Both produce a ``TokenUser``.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple

import jwt
from django.conf import settings
from rest_framework import authentication, exceptions
from rest_framework.request import Request

logger = logging.getLogger(__name__)


def _require_uuid(value: Any, message: str) -> str:
    try:
        return str(uuid.UUID(str(value)))
    except ValueError:
        raise exceptions.AuthenticationFailed(message)


class TokenUser:
    """Authenticated caller built from a JWT payload or gateway headers."""

    def __init__(self, payload: Dict):
        self.payload = payload
        self.id = payload.get('sub')
        self.email = payload.get('email')
        self.roles: List[str] = list(payload.get('roles') or [])
        self.is_active = True
        self.is_authenticated = True
        self.is_anonymous = False

    def __str__(self) -> str:
        return f"TokenUser({self.id})"


class GatewayHeaderAuthentication(authentication.BaseAuthentication):
    """Trusts the identity headers forwarded by the API gateway."""

    user_header = 'X-User-ID'
    roles_header = 'X-User-Roles'

    def authenticate(self, request: Request) -> Optional[Tuple[TokenUser, Dict]]:
        raw_user_id = request.headers.get(self.user_header)
        if not raw_user_id:
            return None

        payload = {
            'sub': _require_uuid(raw_user_id, 'Invalid user id header'),
            'roles': [
                role.strip()
                for role in request.headers.get(self.roles_header, '').split(',')
                if role.strip()
            ],
        }
        return TokenUser(payload), payload

    def authenticate_header(self, request: Request) -> str:
        return 'Gateway'


class JWTAuthentication(authentication.BaseAuthentication):
    """Bearer JWT signed with ``JWT_SETTINGS['SIGNING_KEY']``."""

    keyword = 'Bearer'

    def authenticate(self, request: Request) -> Optional[Tuple[TokenUser, Dict]]:
        parts = authentication.get_authorization_header(request).split()
        if not parts or parts[0].lower() != self.keyword.lower().encode():
            return None
        if len(parts) != 2:
            raise exceptions.AuthenticationFailed('Invalid token header format')

        try:
            token = parts[1].decode('utf-8')
        except UnicodeDecodeError:
            raise exceptions.AuthenticationFailed('Invalid token header encoding')

        payload = self.decode(token)
        payload['sub'] = _require_uuid(payload['sub'], 'Invalid token subject')
        return TokenUser(payload), payload

    def decode(self, token: str) -> Dict:
        jwt_settings = settings.JWT_SETTINGS
        try:
            return jwt.decode(
                token,
                jwt_settings['VERIFYING_KEY'],
                algorithms=[jwt_settings['ALGORITHM']],
                issuer=jwt_settings['ISSUER'],
                options={'require': ['exp', 'sub', 'iss']},
            )
        except jwt.ExpiredSignatureError:
            raise exceptions.AuthenticationFailed('Token has expired')
        except jwt.InvalidTokenError as e:
            logger.warning(f"Rejected bearer token: {e}")
            raise exceptions.AuthenticationFailed('Invalid token')

    def authenticate_header(self, request: Request) -> str:
        return self.keyword
