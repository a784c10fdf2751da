"""
Authentication Decorators

Contains the decorator guarding admin HTTP endpoints.
"""

import base64
import binascii
from functools import wraps

from flask import request

from .helpers import error_response

AUTH_CHALLENGE = {'WWW-Authenticate': 'Basic realm="Admin Panel"'}


def _decode_basic_credentials(encoded: str):
    """Split a Basic authorization payload into (username, password)."""
    try:
        decoded = base64.b64decode(encoded, validate=True).decode('utf-8')
    except (binascii.Error, UnicodeDecodeError):
        return None, None
    username, sep, password = decoded.partition(':')
    if not sep:
        return None, None
    return username, password


def require_admin(f):
    """
    Decorator to require admin authentication for protected HTTP endpoints.

    Accepts either ``Authorization: Basic <credentials>`` or
    ``Authorization: Bearer <token>`` from /api/admin/login.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from ..services.admin_auth_service import get_admin_auth_service

        action = request.endpoint or 'admin'
        auth_service = get_admin_auth_service()
        if not auth_service:
            return error_response(action, 'Admin authentication unavailable', 500)

        auth_header = request.headers.get('Authorization', '')
        scheme, _, credentials = auth_header.partition(' ')

        if scheme == 'Basic' and credentials:
            username, password = _decode_basic_credentials(credentials.strip())
            if not auth_service.verify_credentials(username, password):
                return error_response(action, 'Invalid admin credentials', 401, headers=AUTH_CHALLENGE)
            request.admin = {'username': username}

        elif scheme == 'Bearer' and credentials:
            result = auth_service.verify_token(credentials.strip())
            if not result['success']:
                return error_response(action, result['error'], 401, headers=AUTH_CHALLENGE)
            request.admin = result['admin']

        else:
            return error_response(action, 'Admin authorization required', 401, headers=AUTH_CHALLENGE)

        return f(*args, **kwargs)

    return decorated_function
