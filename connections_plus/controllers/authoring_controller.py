"""
Authoring Controller

Step-by-step game authoring for admins. A draft is created with a title
and date, filled in one level at a time, then published to the store.
"""

from flask import Blueprint, request, jsonify
from ..services.authoring_service import get_authoring_service
from ..utils.decorators import require_admin
from ..utils.errors import ConnectionsError, ValidationError
from ..utils.game_logger import game_logger
from ..utils.helpers import error_response

authoring_bp = Blueprint('authoring', __name__)


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body is required')
    return data


def _level_number(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError('Level must be a number')


def _draft_response(action, draft, status_code=200, **extra):
    response_data = {'success': True, 'draft': draft.to_dict()}
    response_data.update(extra)
    game_logger.log_server_response(request, action, True, response_data, draft.date,
                                    draft_id=draft.draft_id)
    return jsonify(response_data), status_code


def _failure(action, error):
    game_logger.log_error(request, error, action)
    if isinstance(error, ConnectionsError):
        return error_response(action, error.message, error.status_code)
    return error_response(action, 'Failed to update draft', 500)


@authoring_bp.route('/admin/drafts', methods=['POST'])
@require_admin
def create_draft():
    """Start a new draft for a date."""
    try:
        authoring_service = get_authoring_service()
        if not authoring_service:
            return error_response('create_draft', 'Authoring service unavailable', 500)

        data = _json_body()
        game_logger.log_user_action(request, 'create_draft', data.get('date'), title=data.get('title'))

        draft = authoring_service.create_draft(data.get('title'), data.get('date'))
        return _draft_response('create_draft', draft, 201)

    except Exception as e:
        return _failure('create_draft', e)


@authoring_bp.route('/admin/drafts/<draft_id>', methods=['GET'])
@require_admin
def get_draft(draft_id):
    try:
        authoring_service = get_authoring_service()
        if not authoring_service:
            return error_response('get_draft', 'Authoring service unavailable', 500)

        draft = authoring_service.get_draft(draft_id)
        return _draft_response('get_draft', draft)

    except Exception as e:
        return _failure('get_draft', e)


@authoring_bp.route('/admin/drafts/<draft_id>', methods=['DELETE'])
@require_admin
def discard_draft(draft_id):
    try:
        authoring_service = get_authoring_service()
        if not authoring_service:
            return error_response('discard_draft', 'Authoring service unavailable', 500)

        game_logger.log_user_action(request, 'discard_draft', draft_id=draft_id)
        authoring_service.discard_draft(draft_id)

        response_data = {'success': True, 'message': 'Draft discarded'}
        game_logger.log_server_response(request, 'discard_draft', True, response_data)
        return jsonify(response_data)

    except Exception as e:
        return _failure('discard_draft', e)


@authoring_bp.route('/admin/drafts/<draft_id>/groups', methods=['POST'])
@require_admin
def add_group(draft_id):
    """Add a typed-in group to the level being authored."""
    try:
        authoring_service = get_authoring_service()
        if not authoring_service:
            return error_response('add_group', 'Authoring service unavailable', 500)

        data = _json_body()
        draft = authoring_service.get_draft(draft_id)
        level = _level_number(data.get('level', draft.current_level))
        game_logger.log_user_action(request, 'add_group', draft.date, draft_id=draft_id, level=level)

        group = draft.add_group(level, data.get('title'), data.get('words'), data.get('difficulty', ''))
        return _draft_response('add_group', draft, 201, group=group.to_dict())

    except Exception as e:
        return _failure('add_group', e)


@authoring_bp.route('/admin/drafts/<draft_id>/generate', methods=['POST'])
@require_admin
def generate_group(draft_id):
    """Generate a group's words from a category and add it."""
    try:
        authoring_service = get_authoring_service()
        if not authoring_service:
            return error_response('generate_group', 'Authoring service unavailable', 500)

        data = _json_body()
        draft = authoring_service.get_draft(draft_id)
        level = _level_number(data.get('level', draft.current_level))
        game_logger.log_user_action(request, 'generate_group', draft.date, draft_id=draft_id, level=level,
                                    category=data.get('category'), difficulty=data.get('difficulty'))

        group = authoring_service.generate_group(draft_id, level, data.get('category'), data.get('difficulty'))
        return _draft_response('generate_group', draft, 201, group=group.to_dict())

    except Exception as e:
        return _failure('generate_group', e)


@authoring_bp.route('/admin/drafts/<draft_id>/groups/<int:level>/<int:index>', methods=['DELETE'])
@require_admin
def remove_group(draft_id, level, index):
    try:
        authoring_service = get_authoring_service()
        if not authoring_service:
            return error_response('remove_group', 'Authoring service unavailable', 500)

        draft = authoring_service.get_draft(draft_id)
        game_logger.log_user_action(request, 'remove_group', draft.date, draft_id=draft_id, level=level, index=index)

        draft.remove_group(level, index)
        return _draft_response('remove_group', draft)

    except Exception as e:
        return _failure('remove_group', e)


@authoring_bp.route('/admin/drafts/<draft_id>/red-herrings/<int:level>', methods=['PUT'])
@require_admin
def set_red_herring(draft_id, level):
    try:
        authoring_service = get_authoring_service()
        if not authoring_service:
            return error_response('set_red_herring', 'Authoring service unavailable', 500)

        data = _json_body()
        draft = authoring_service.get_draft(draft_id)
        game_logger.log_user_action(request, 'set_red_herring', draft.date, draft_id=draft_id, level=level)

        draft.set_red_herring(level, data.get('word'))
        return _draft_response('set_red_herring', draft)

    except Exception as e:
        return _failure('set_red_herring', e)


@authoring_bp.route('/admin/drafts/<draft_id>/final-group', methods=['PUT'])
@require_admin
def set_final_group(draft_id):
    """Author the hidden final group of the last level."""
    try:
        authoring_service = get_authoring_service()
        if not authoring_service:
            return error_response('set_final_group', 'Authoring service unavailable', 500)

        data = _json_body()
        draft = authoring_service.get_draft(draft_id)
        game_logger.log_user_action(request, 'set_final_group', draft.date, draft_id=draft_id)

        if data.get('title'):
            group = draft.set_final_group(data.get('words'), data['title'])
        else:
            group = draft.set_final_group(data.get('words'))
        return _draft_response('set_final_group', draft, group=group.to_dict())

    except Exception as e:
        return _failure('set_final_group', e)


@authoring_bp.route('/admin/drafts/<draft_id>/complete-level', methods=['POST'])
@require_admin
def complete_level(draft_id):
    try:
        authoring_service = get_authoring_service()
        if not authoring_service:
            return error_response('complete_level', 'Authoring service unavailable', 500)

        draft = authoring_service.get_draft(draft_id)
        game_logger.log_user_action(request, 'complete_level', draft.date, draft_id=draft_id,
                                    level=draft.current_level)

        draft.complete_level()
        return _draft_response('complete_level', draft)

    except Exception as e:
        return _failure('complete_level', e)


@authoring_bp.route('/admin/drafts/<draft_id>/publish', methods=['POST'])
@require_admin
def publish_draft(draft_id):
    """Save a finished draft as the game for its date."""
    try:
        authoring_service = get_authoring_service()
        if not authoring_service:
            return error_response('publish_draft', 'Authoring service unavailable', 500)

        game_logger.log_user_action(request, 'publish_draft', draft_id=draft_id)

        config = authoring_service.publish(draft_id)
        response_data = {
            'success': True,
            'gameId': config.id,
            'date': config.date,
            'title': config.title,
            'game': config.to_dict()
        }
        game_logger.log_server_response(request, 'publish_draft', True, response_data, config.date)
        game_logger.log_game_event(config.date, 'game_published', draft_id=draft_id)
        return jsonify(response_data)

    except Exception as e:
        return _failure('publish_draft', e)
