"""
WebSocket Event Handlers

Drives play sessions over Socket.IO. Each session gets its own room, named
after the session id, so background events (progress saves, the delayed
final reveal) reach the right client.
"""

from flask import request
from flask_socketio import emit, join_room, leave_room
from ..services.play_service import get_play_service
from ..utils.errors import ConnectionsError, NotFoundError
from ..utils.game_logger import game_logger


def _owned_session(play_service, data):
    """Resolve the session named in the payload, if this socket drives it."""
    session_id = (data or {}).get('session_id')
    if not session_id:
        raise NotFoundError('Session ID is required')
    session = play_service.get_session(session_id)
    if session.sid != request.sid:
        raise NotFoundError('Play session not found')
    return session


def _emit_error(event, error):
    if isinstance(error, ConnectionsError):
        emit('error', {'event': event, 'error': error.message, 'status': error.status_code})
    else:
        game_logger.logger.error(f"WebSocket '{event}' failed: {error}")
        emit('error', {'event': event, 'error': 'Internal server error', 'status': 500})


def register_websocket_handlers(socketio):
    """Register all WebSocket event handlers."""

    def forward_play_event(session_id, event, payload):
        socketio.emit(event, payload, to=session_id)

    play_service = get_play_service()
    if play_service:
        play_service.add_listener(forward_play_event)

    @socketio.on('connect')
    def handle_connect():
        """Handle WebSocket connection."""
        pass

    @socketio.on('disconnect')
    def handle_disconnect():
        """Drop any sessions the closed socket was driving."""
        play_service = get_play_service()
        if not play_service:
            return
        ended = play_service.end_sessions_for_sid(request.sid)
        if ended:
            game_logger.logger.info(f"WebSocket disconnect: ended {ended} play session(s) for {request.sid}")

    @socketio.on('start_game')
    def handle_start_game(data=None):
        """Start a session for today's puzzle (or data['date'])."""
        try:
            play_service = get_play_service()
            if not play_service:
                emit('error', {'event': 'start_game', 'error': 'Play service unavailable', 'status': 500})
                return

            data = data or {}
            session = play_service.start_session(
                player_id=data.get('playerId'),
                date=data.get('date'),
                sid=request.sid,
            )
            join_room(session.session_id)
            emit('game_started', play_service.view(session))

        except Exception as e:
            _emit_error('start_game', e)

    @socketio.on('end_game')
    def handle_end_game(data=None):
        try:
            play_service = get_play_service()
            session = _owned_session(play_service, data)
            play_service.end_session(session.session_id)
            leave_room(session.session_id)
        except Exception as e:
            _emit_error('end_game', e)

    @socketio.on('select_word')
    def handle_select_word(data=None):
        """Toggle a tile in or out of the selection."""
        try:
            play_service = get_play_service()
            session = _owned_session(play_service, data)
            play_service.select_word(session.session_id, data.get('word'))
            emit('state_update', play_service.view(session))
        except Exception as e:
            _emit_error('select_word', e)

    @socketio.on('deselect_all')
    def handle_deselect_all(data=None):
        try:
            play_service = get_play_service()
            session = _owned_session(play_service, data)
            play_service.deselect_all(session.session_id)
            emit('state_update', play_service.view(session))
        except Exception as e:
            _emit_error('deselect_all', e)

    @socketio.on('shuffle')
    def handle_shuffle(data=None):
        try:
            play_service = get_play_service()
            session = _owned_session(play_service, data)
            play_service.shuffle(session.session_id)
            emit('state_update', play_service.view(session))
        except Exception as e:
            _emit_error('shuffle', e)

    @socketio.on('submit_guess')
    def handle_submit_guess(data=None):
        """Evaluate the current selection."""
        try:
            play_service = get_play_service()
            session = _owned_session(play_service, data)
            result = play_service.submit_guess(session.session_id)
            view = play_service.view(session)
            view['outcome'] = result.outcome.value
            view['group'] = result.group.to_dict() if result.group else None
            emit('state_update', view)
        except Exception as e:
            _emit_error('submit_guess', e)

    @socketio.on('advance_level')
    def handle_advance_level(data=None):
        try:
            play_service = get_play_service()
            session = _owned_session(play_service, data)
            play_service.advance(session.session_id)
            emit('state_update', play_service.view(session))
        except Exception as e:
            _emit_error('advance_level', e)

    @socketio.on('restart')
    def handle_restart(data=None):
        try:
            play_service = get_play_service()
            session = _owned_session(play_service, data)
            play_service.restart(session.session_id)
            emit('state_update', play_service.view(session))
        except Exception as e:
            _emit_error('restart', e)
