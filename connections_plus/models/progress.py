"""
Player Progress Model

Per-player, per-date progress record as persisted in the game store.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class PlayerProgress:
    """Progress of one player through one day's puzzle."""
    player_id: str
    game_id: str
    current_level: int = 1
    completed_groups: List[List[str]] = field(default_factory=list)
    mistakes: int = 0
    start_time: str = ""
    last_activity: str = ""
    completed: bool = False
    perfect: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'playerId': self.player_id,
            'gameId': self.game_id,
            'currentLevel': self.current_level,
            'completedGroups': [list(group) for group in self.completed_groups],
            'mistakes': self.mistakes,
            'startTime': self.start_time,
            'lastActivity': self.last_activity,
            'completed': self.completed,
            'perfect': self.perfect,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PlayerProgress':
        return cls(
            player_id=data['playerId'],
            game_id=data['gameId'],
            current_level=data.get('currentLevel', 1),
            completed_groups=[list(group) for group in data.get('completedGroups') or []],
            mistakes=data.get('mistakes', 0),
            start_time=data.get('startTime', ""),
            last_activity=data.get('lastActivity', ""),
            completed=bool(data.get('completed', False)),
            perfect=bool(data.get('perfect', False)),
        )
