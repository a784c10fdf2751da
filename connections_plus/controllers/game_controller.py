"""
Game Controller

Handles the player-facing HTTP endpoints: today's puzzle, progress saves
and the can-I-play check.
"""

import datetime

from flask import Blueprint, request, jsonify
from ..services.game_store import get_game_store, parse_game_date, today_game_id
from ..services.play_service import get_play_service
from ..utils.errors import ConnectionsError
from ..utils.game_logger import game_logger
from ..utils.helpers import error_response

game_bp = Blueprint('game', __name__)


@game_bp.route('/game-config', methods=['GET'])
def get_game_config():
    """Serve the puzzle for today (or an explicit past date)."""
    requested = request.args.get('date', 'today')
    try:
        game_store = get_game_store()
        if not game_store:
            return error_response('get_game_config', 'Game store unavailable', 500)

        game_id = today_game_id() if requested == 'today' else requested
        game_logger.log_user_action(request, 'get_game_config', game_id)

        if parse_game_date(game_id) > datetime.date.fromisoformat(today_game_id()):
            return error_response('get_game_config', 'Future games are not available yet', 400, game_id)

        config = game_store.get_game_config(game_id)
        if config is None:
            message = 'No game available for today' if requested == 'today' else 'Game not found for this date'
            return error_response('get_game_config', message, 404, game_id)

        response_data = config.to_public_dict()
        game_logger.log_server_response(request, 'get_game_config', True, response_data, game_id)
        return jsonify(response_data)

    except ConnectionsError as e:
        game_logger.log_error(request, e, 'get_game_config', requested)
        return error_response('get_game_config', e.message, e.status_code, requested)
    except Exception as e:
        game_logger.log_error(request, e, 'get_game_config', requested)
        return error_response('get_game_config', 'Failed to fetch game', 500, requested)


@game_bp.route('/progress', methods=['POST'])
def save_progress():
    """Upsert a player's progress unless the game is already completed."""
    data = request.get_json(silent=True) or {}
    game_id = data.get('gameId')
    try:
        game_store = get_game_store()
        if not game_store:
            return error_response('save_progress', 'Game store unavailable', 500, game_id)

        game_logger.log_user_action(
            request, 'save_progress', game_id,
            player_id=data.get('playerId'), current_level=data.get('currentLevel'),
            completed=bool(data.get('completed'))
        )

        progress = game_store.submit_progress(
            player_id=data.get('playerId'),
            game_id=game_id,
            current_level=data.get('currentLevel'),
            completed_groups=data.get('completedGroups'),
            mistakes=data.get('mistakes'),
            completed=bool(data.get('completed', False)),
            perfect=bool(data.get('perfect', False)),
        )

        response_data = {
            'success': True,
            'progress': progress.to_dict()
        }
        game_logger.log_server_response(request, 'save_progress', True, response_data, game_id)
        if progress.completed:
            game_logger.log_game_event(game_id, 'game_completed', progress.player_id,
                                       perfect=progress.perfect, mistakes=progress.mistakes)
        return jsonify(response_data)

    except ConnectionsError as e:
        game_logger.log_error(request, e, 'save_progress', game_id)
        return error_response('save_progress', e.message, e.status_code, game_id)
    except Exception as e:
        game_logger.log_error(request, e, 'save_progress', game_id)
        return error_response('save_progress', 'Failed to save progress', 500, game_id)


@game_bp.route('/player-status', methods=['GET'])
def player_status():
    """Tell a player whether today's game is still open to them."""
    player_id = request.args.get('playerId')
    game_id = today_game_id()
    try:
        game_store = get_game_store()
        if not game_store:
            return error_response('player_status', 'Game store unavailable', 500, game_id)

        if not player_id:
            return error_response('player_status', 'Player ID is required', 400, game_id)

        game_logger.log_user_action(request, 'player_status', game_id)

        progress = game_store.get_player_progress(player_id, game_id)
        response_data = {
            'canPlay': progress is None or not progress.completed,
            'progress': progress.to_dict() if progress else None
        }
        game_logger.log_server_response(request, 'player_status', True, response_data, game_id)
        return jsonify(response_data)

    except ConnectionsError as e:
        game_logger.log_error(request, e, 'player_status', game_id)
        return error_response('player_status', e.message, e.status_code, game_id)
    except Exception as e:
        game_logger.log_error(request, e, 'player_status', game_id)
        return error_response('player_status', 'Failed to fetch player status', 500, game_id)


@game_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    try:
        game_store = get_game_store()
        play_service = get_play_service()

        game_logger.log_user_action(request, 'health_check')

        response_data = {
            'status': 'healthy',
            'store_backend': getattr(game_store.kv, 'backend', 'unknown') if game_store else None,
            'active_sessions': len(play_service.sessions) if play_service else 0,
            'log_stats': game_logger.get_log_stats(),
        }

        game_logger.log_server_response(request, 'health_check', True, response_data)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'health_check')
        error_response_data = {
            'status': 'error',
            'error': str(e)
        }
        game_logger.log_server_response(request, 'health_check', False, error_response_data)
        return jsonify(error_response_data), 500
