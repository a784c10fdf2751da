"""
Game Logger Module for Connections Plus

This module provides structured logging for player actions, admin actions,
server responses and game events. Each entry is one JSON document so the
daily log file can be parsed line by line.
"""

import logging
import json
import os
from datetime import datetime
from typing import Dict, Any, Optional
from pathlib import Path


class GameLogger:
    """
    Centralized logging system for the Connections Plus server.

    Features:
    - Player and admin action tracking with IP identification
    - Server response logging with puzzle answers kept out of the log
    - Game event logging (levels completed, progress saves)
    - JSON structured logs for easy parsing
    """

    def __init__(self, log_dir: str = "logs", level: str = "INFO"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.level = getattr(logging, str(level).upper(), logging.INFO)

        # Setup main game logger
        self.logger = self._setup_logger()

    def _log_file(self) -> Path:
        return self.log_dir / f"connections_log_{datetime.now().strftime('%Y-%m-%d')}.log"

    def _setup_logger(self) -> logging.Logger:
        """Setup the main logger with file and console handlers."""
        logger = logging.getLogger('connections_plus')
        logger.setLevel(self.level)

        # Prevent duplicate handlers
        if logger.handlers:
            logger.handlers.clear()

        file_handler = logging.FileHandler(self._log_file(), encoding='utf-8')
        file_handler.setLevel(self.level)

        # Console only shows warnings and errors
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)

        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s | %(levelname)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))

        logger.addHandler(file_handler)
        logger.addHandler(console_handler)

        return logger

    def _create_log_entry(self,
                          event_type: str,
                          action: str,
                          user_info: Dict[str, Any],
                          details: Dict[str, Any]) -> str:
        """Create a structured log entry."""
        log_entry = {
            'timestamp': datetime.now().isoformat(),
            'event_type': event_type,
            'action': action,
            'user': user_info,
            'details': details
        }
        return json.dumps(log_entry, ensure_ascii=False, default=str)

    def log_user_action(self,
                        request,
                        action: str,
                        game_id: Optional[str] = None,
                        **kwargs):
        """
        Log player or admin actions with full context.

        Args:
            request: Flask request object
            action: Type of action (e.g., 'get_game_config', 'save_progress')
            game_id: Game date if applicable
            **kwargs: Additional details to log
        """
        from .helpers import get_user_identity

        details = {
            'game_id': game_id,
            'endpoint': request.endpoint,
            'method': request.method,
            'url': request.url,
            **kwargs
        }

        self.logger.info(self._create_log_entry('USER_ACTION', action, get_user_identity(request), details))

    def log_server_response(self,
                            request,
                            action: str,
                            success: bool,
                            response_data: Dict[str, Any],
                            game_id: Optional[str] = None,
                            **kwargs):
        """
        Log server responses with full context.

        Args:
            request: Flask request object
            action: Action that was performed
            success: Whether the action succeeded
            response_data: Data being returned to client
            game_id: Game date if applicable
            **kwargs: Additional details to log
        """
        from .helpers import get_user_identity

        details = {
            'game_id': game_id,
            'success': success,
            'response_size': len(str(response_data)),
            'response_data': self._sanitize_response_data(response_data),
            **kwargs
        }

        event_type = 'SERVER_RESPONSE_SUCCESS' if success else 'SERVER_RESPONSE_ERROR'
        log_message = self._create_log_entry(event_type, action, get_user_identity(request), details)

        if success:
            self.logger.info(log_message)
        else:
            self.logger.error(log_message)

    def log_game_event(self,
                       game_id: Optional[str],
                       event: str,
                       player_id: Optional[str] = None,
                       **kwargs):
        """
        Log game-specific events (levels completed, progress saved, etc.).

        Args:
            game_id: Game date
            event: Type of game event (e.g., 'level_complete', 'progress_save_failed')
            player_id: Player the event belongs to
            **kwargs: Additional game details
        """
        user_info = {'user_ip': None, 'player_id': player_id, 'admin': None}
        details = {'game_id': game_id, **kwargs}

        log_message = self._create_log_entry('GAME_EVENT', event, user_info, details)
        if event.endswith('_failed'):
            self.logger.warning(log_message)
        else:
            self.logger.info(log_message)

    def log_error(self,
                  request,
                  error: Exception,
                  action: str,
                  game_id: Optional[str] = None):
        """
        Log errors with full context.

        Args:
            request: Flask request object
            error: Exception that occurred
            action: Action that was being performed
            game_id: Game date if applicable
        """
        from .helpers import get_user_identity

        details = {
            'game_id': game_id,
            'error_type': type(error).__name__,
            'error_message': str(error),
            'action': action
        }

        self.logger.error(self._create_log_entry('ERROR', action, get_user_identity(request), details))

    def _sanitize_response_data(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Summarize puzzle contents so answers never land in the log."""
        if not isinstance(data, dict):
            return {'data_type': type(data).__name__}

        sanitized = data.copy()

        if isinstance(sanitized.get('levels'), list):
            sanitized['levels'] = {'level_count': len(sanitized['levels'])}

        game = sanitized.get('game')
        if isinstance(game, dict):
            sanitized['game'] = {
                'id': game.get('id'),
                'title': game.get('title'),
                'level_count': len(game.get('levels') or []),
            }

        draft = sanitized.get('draft')
        if isinstance(draft, dict):
            sanitized['draft'] = {
                'draftId': draft.get('draftId'),
                'date': draft.get('date'),
                'currentLevel': draft.get('currentLevel'),
            }

        if isinstance(sanitized.get('group'), dict):
            sanitized['group'] = {'title': sanitized['group'].get('title')}

        if isinstance(sanitized.get('words'), list):
            sanitized['words'] = {'word_count': len(sanitized['words'])}

        if 'token' in sanitized:
            sanitized['token'] = '***'

        return sanitized

    def get_log_stats(self) -> Dict[str, Any]:
        """Get statistics about logged events (useful for monitoring)."""
        try:
            log_file = self._log_file()
            if not log_file.exists():
                return {'error': 'No log file found for today'}

            stats = {
                'log_file': str(log_file),
                'file_size_mb': round(log_file.stat().st_size / (1024 * 1024), 2),
                'total_entries': 0,
                'user_actions': 0,
                'server_responses': 0,
                'game_events': 0,
                'errors': 0
            }

            with open(log_file, 'r', encoding='utf-8') as f:
                for line in f:
                    if line.strip():
                        stats['total_entries'] += 1
                        if 'USER_ACTION' in line:
                            stats['user_actions'] += 1
                        elif 'SERVER_RESPONSE' in line:
                            stats['server_responses'] += 1
                        elif 'GAME_EVENT' in line:
                            stats['game_events'] += 1
                        elif 'ERROR' in line:
                            stats['errors'] += 1

            return stats

        except OSError as e:
            return {'error': f'Failed to get stats: {str(e)}'}


# Global logger instance
game_logger = GameLogger(os.getenv('LOG_DIR', 'logs'), os.getenv('LOG_LEVEL', 'INFO'))
