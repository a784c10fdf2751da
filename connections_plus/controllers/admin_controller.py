"""
Admin Controller

Handles the operator's HTTP endpoints: login, the dated game calendar
(list, read, overwrite, delete) and word generation.
"""

from flask import Blueprint, request, jsonify
from ..models.puzzle import GameConfig
from ..services.admin_auth_service import get_admin_auth_service
from ..services.game_store import get_game_store, parse_game_date
from ..services.word_generator import get_word_generator
from ..utils.decorators import require_admin
from ..utils.errors import ConnectionsError, ValidationError
from ..utils.game_logger import game_logger
from ..utils.helpers import error_response, format_game_date

admin_bp = Blueprint('admin', __name__)


@admin_bp.route('/admin/login', methods=['POST'])
def login():
    """Exchange admin credentials for a bearer token."""
    try:
        auth_service = get_admin_auth_service()
        if not auth_service:
            return error_response('admin_login', 'Admin authentication unavailable', 500)

        data = request.get_json(silent=True)
        if not data:
            return error_response('admin_login', 'Request body is required', 400)

        game_logger.log_user_action(request, 'admin_login', extra_data={'username': data.get('username')})

        result = auth_service.login(data.get('username'), data.get('password'))
        if not result['success']:
            return error_response('admin_login', result['error'], 401)

        game_logger.log_server_response(request, 'admin_login', True, result)
        return jsonify(result)

    except Exception as e:
        game_logger.log_error(request, e, 'admin_login')
        return error_response('admin_login', 'Login failed', 500)


@admin_bp.route('/games', methods=['GET'])
@require_admin
def list_games():
    """Summaries of every saved game in a month."""
    year = request.args.get('year')
    month = request.args.get('month')
    try:
        game_store = get_game_store()
        if not game_store:
            return error_response('list_games', 'Game store unavailable', 500)

        if not year or not month:
            return error_response('list_games', 'Year and month parameters are required', 400)
        try:
            year_num = int(year)
            month_num = int(month)
        except ValueError:
            return error_response('list_games', 'Invalid year or month values', 400)
        if not 1 <= year_num <= 9999 or not 1 <= month_num <= 12:
            return error_response('list_games', 'Invalid year or month values', 400)

        game_logger.log_user_action(request, 'list_games', year=year_num, month=month_num)

        summaries = game_store.list_game_summaries(year_num, month_num)
        response_data = {
            'success': True,
            'games': [summary.to_dict() for summary in summaries],
            'year': year_num,
            'month': month_num
        }
        game_logger.log_server_response(request, 'list_games', True, response_data, games_found=len(summaries))
        return jsonify(response_data)

    except ConnectionsError as e:
        game_logger.log_error(request, e, 'list_games')
        return error_response('list_games', e.message, e.status_code)
    except Exception as e:
        game_logger.log_error(request, e, 'list_games')
        return error_response('list_games', 'Failed to fetch games', 500)


@admin_bp.route('/games/<date>', methods=['GET'])
@require_admin
def get_game(date):
    """Full config for one date, for editing."""
    try:
        game_store = get_game_store()
        if not game_store:
            return error_response('get_game', 'Game store unavailable', 500, date)

        parse_game_date(date)
        game_logger.log_user_action(request, 'get_game', date)

        config = game_store.get_game_config(date)
        if config is None:
            return error_response('get_game', 'Game not found for this date', 404, date)

        response_data = {
            'success': True,
            'game': config.to_dict(),
            'displayDate': format_game_date(date),
            'players': game_store.count_players(date)
        }
        game_logger.log_server_response(request, 'get_game', True, response_data, date)
        return jsonify(response_data)

    except ConnectionsError as e:
        game_logger.log_error(request, e, 'get_game', date)
        return error_response('get_game', e.message, e.status_code, date)
    except Exception as e:
        game_logger.log_error(request, e, 'get_game', date)
        return error_response('get_game', 'Failed to fetch game', 500, date)


@admin_bp.route('/games/<date>', methods=['PUT'])
@require_admin
def update_game(date):
    """Overwrite the config stored for a date."""
    try:
        game_store = get_game_store()
        if not game_store:
            return error_response('update_game', 'Game store unavailable', 500, date)

        parse_game_date(date)
        data = request.get_json(silent=True)
        if not data or not data.get('levels') or not data.get('title'):
            return error_response('update_game', 'Invalid game data - missing required fields', 400, date)

        game_logger.log_user_action(request, 'update_game', date, title=data.get('title'))

        config = GameConfig.from_dict(data, date=date)
        game_store.save_game_config(config)

        response_data = {
            'success': True,
            'game': config.to_dict()
        }
        game_logger.log_server_response(request, 'update_game', True, response_data, date)
        return jsonify(response_data)

    except ConnectionsError as e:
        game_logger.log_error(request, e, 'update_game', date)
        return error_response('update_game', e.message, e.status_code, date)
    except Exception as e:
        game_logger.log_error(request, e, 'update_game', date)
        return error_response('update_game', 'Failed to update game', 500, date)


@admin_bp.route('/games/<date>', methods=['DELETE'])
@require_admin
def delete_game(date):
    """Delete the config stored for a date."""
    try:
        game_store = get_game_store()
        if not game_store:
            return error_response('delete_game', 'Game store unavailable', 500, date)

        parse_game_date(date)
        game_logger.log_user_action(request, 'delete_game', date)

        if not game_store.delete_game_config(date):
            return error_response('delete_game', 'Game not found for this date', 404, date)

        response_data = {
            'success': True,
            'message': 'Game deleted successfully'
        }
        game_logger.log_server_response(request, 'delete_game', True, response_data, date)
        game_logger.log_game_event(date, 'game_deleted')
        return jsonify(response_data)

    except ConnectionsError as e:
        game_logger.log_error(request, e, 'delete_game', date)
        return error_response('delete_game', e.message, e.status_code, date)
    except Exception as e:
        game_logger.log_error(request, e, 'delete_game', date)
        return error_response('delete_game', 'Failed to delete game', 500, date)


@admin_bp.route('/save-config', methods=['POST'])
@require_admin
def save_config():
    """Save a complete config whose date is given in the body."""
    data = request.get_json(silent=True)
    date = data.get('date') if isinstance(data, dict) else None
    try:
        game_store = get_game_store()
        if not game_store:
            return error_response('save_config', 'Game store unavailable', 500, date)

        if not data or not data.get('levels') or not data.get('title') or not date:
            return error_response('save_config', 'Invalid game config format - missing required fields', 400, date)

        game_logger.log_user_action(request, 'save_config', date, title=data.get('title'))

        config = GameConfig.from_dict(data)
        game_store.save_game_config(config)

        response_data = {
            'success': True,
            'gameId': config.id,
            'date': config.date,
            'title': config.title
        }
        game_logger.log_server_response(request, 'save_config', True, response_data, date)
        return jsonify(response_data)

    except ConnectionsError as e:
        game_logger.log_error(request, e, 'save_config', date)
        return error_response('save_config', e.message, e.status_code, date)
    except Exception as e:
        game_logger.log_error(request, e, 'save_config', date)
        return error_response('save_config', 'Failed to save game config', 500, date)


@admin_bp.route('/words', methods=['POST'])
@require_admin
def generate_words():
    """Generate four words for a category and difficulty."""
    data = request.get_json(silent=True) or {}
    category = data.get('category')
    difficulty = data.get('difficulty')
    try:
        word_generator = get_word_generator()
        if not word_generator:
            return error_response('generate_words', 'Word generation unavailable', 500)

        if not category or not difficulty:
            raise ValidationError('Category and difficulty are required')

        game_logger.log_user_action(request, 'generate_words', category=category, difficulty=difficulty)

        words = word_generator.generate(category, difficulty)
        response_data = {
            'words': words,
            'category': category,
            'difficulty': difficulty
        }
        game_logger.log_server_response(request, 'generate_words', True, response_data)
        return jsonify(response_data)

    except ConnectionsError as e:
        game_logger.log_error(request, e, 'generate_words')
        return error_response('generate_words', e.message, e.status_code)
    except Exception as e:
        game_logger.log_error(request, e, 'generate_words')
        return error_response('generate_words', 'Internal server error', 500)
