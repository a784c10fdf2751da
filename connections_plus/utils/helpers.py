"""
Helper Functions

Contains utility functions used throughout the application.
"""

import datetime
import secrets
import time
from typing import Any, Dict, Optional

from flask import jsonify, request

from ..config.game_settings import PLAYER_ID_PREFIX


def get_user_identity(request_obj=None) -> Dict[str, Any]:
    """Extract caller identity information from request."""
    if request_obj is None:
        request_obj = request

    admin = getattr(request_obj, 'admin', None)
    player_id = None
    args = getattr(request_obj, 'args', None)
    if args is not None:
        player_id = args.get('playerId')

    return {
        'user_ip': getattr(request_obj, 'remote_addr', None) or 'unknown',
        'player_id': player_id,
        'admin': admin['username'] if admin else None,
    }


def generate_player_id() -> str:
    """New anonymous player id, e.g. ``player_1760745600000_k3j9x0a2b``."""
    return f"{PLAYER_ID_PREFIX}{int(time.time() * 1000)}_{secrets.token_hex(5)[:9]}"


def format_game_date(date_str: str) -> str:
    """Long display form of a game date: 'Saturday, October 18, 2026'."""
    date = datetime.date.fromisoformat(date_str)
    return f"{date.strftime('%A, %B')} {date.day}, {date.year}"


def error_response(action: str, message: str, status_code: int,
                   game_id: Optional[str] = None, headers: Optional[Dict[str, str]] = None):
    """Log a failed action and build the standard JSON error response."""
    from .game_logger import game_logger

    body = {'success': False, 'error': message}
    game_logger.log_server_response(request, action, False, body, game_id, status_code=status_code)
    response = jsonify(body)
    response.status_code = status_code
    if headers:
        response.headers.update(headers)
    return response
