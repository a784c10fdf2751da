"""
Puzzle Data Models

Contains the authored puzzle structures: word groups, levels and the
per-date game configuration, plus their JSON wire format.
"""

import datetime
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..config.game_settings import (
    DATE_PATTERN, FINAL_LEVEL, GROUPS_PER_LEVEL, LEVEL_COUNT, WORDS_PER_GROUP,
)
from ..utils.errors import ValidationError


def normalize_word(word: Any) -> str:
    """Uppercase and strip a single word, rejecting non-strings and blanks."""
    if not isinstance(word, str) or not word.strip():
        raise ValidationError("Words must be non-empty strings")
    return word.strip().upper()


def validate_date(date: Any) -> str:
    """Return the date string if it is a real YYYY-MM-DD calendar date, else raise."""
    if not isinstance(date, str) or not DATE_PATTERN.fullmatch(date):
        raise ValidationError("Invalid date format. Use YYYY-MM-DD")
    try:
        datetime.date.fromisoformat(date)
    except ValueError as e:
        raise ValidationError("Invalid date format. Use YYYY-MM-DD") from e
    return date


@dataclass
class WordGroup:
    """A category of exactly four words."""
    title: str
    words: List[str]
    color: str = ""

    def word_set(self) -> frozenset:
        return frozenset(self.words)

    def to_dict(self) -> Dict[str, Any]:
        return {'title': self.title, 'words': list(self.words), 'color': self.color}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WordGroup':
        if not isinstance(data, dict):
            raise ValidationError("Each group must be an object")
        title = data.get('title')
        if not isinstance(title, str) or not title.strip():
            raise ValidationError("Each group requires a title")
        words = data.get('words')
        if not isinstance(words, list) or len(words) != WORDS_PER_GROUP:
            raise ValidationError(
                f"Group '{title}' must contain exactly {WORDS_PER_GROUP} words"
            )
        normalized = [normalize_word(w) for w in words]
        if len(set(normalized)) != WORDS_PER_GROUP:
            raise ValidationError(f"Words within group '{title}' must be unique")
        return cls(title=title.strip(), words=normalized, color=str(data.get('color') or ''))


@dataclass
class Level:
    """One round of the puzzle."""
    groups: List[WordGroup]
    red_herring: str = ""

    def all_words(self) -> List[str]:
        """Group words in authoring order."""
        return [word for group in self.groups for word in group.words]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'groups': [group.to_dict() for group in self.groups],
            'redHerring': self.red_herring,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], number: int) -> 'Level':
        if not isinstance(data, dict):
            raise ValidationError(f"Level {number} must be an object")
        raw_groups = data.get('groups')
        if not isinstance(raw_groups, list) or len(raw_groups) != GROUPS_PER_LEVEL:
            raise ValidationError(f"Level {number} must contain exactly {GROUPS_PER_LEVEL} groups")
        groups = [WordGroup.from_dict(group) for group in raw_groups]

        level = cls(groups=groups)
        words = level.all_words()
        if len(set(words)) != len(words):
            raise ValidationError(f"Words must be unique across the groups of level {number}")

        red_herring = data.get('redHerring') or ""
        if not isinstance(red_herring, str):
            raise ValidationError(f"Red herring for level {number} must be a string")
        red_herring = red_herring.strip().upper()

        if number == FINAL_LEVEL:
            if red_herring:
                raise ValidationError("The final level has no red herring")
        elif red_herring not in words:
            raise ValidationError(
                f"Red herring for level {number} must be one of that level's words"
            )
        level.red_herring = red_herring
        return level


@dataclass
class GameConfig:
    """A complete daily puzzle, keyed by its calendar date."""
    id: str
    date: str
    title: str
    levels: List[Level] = field(default_factory=list)

    def level(self, number: int) -> Level:
        """Return a level by its 1-based number."""
        return self.levels[number - 1]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'date': self.date,
            'title': self.title,
            'levels': [level.to_dict() for level in self.levels],
        }

    def to_public_dict(self) -> Dict[str, Any]:
        """Shape served to players."""
        return {
            'gameId': self.id,
            'date': self.date,
            'title': self.title or "Daily Puzzle",
            'levels': [level.to_dict() for level in self.levels],
        }

    def summary(self) -> 'GameSummary':
        return GameSummary(date=self.date, title=self.title, id=self.id)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], date: str = None) -> 'GameConfig':
        """
        Parse and shape-check a config.

        Args:
            data: Wire-format dictionary
            date: Date the config is stored under; overrides any date in data

        Raises:
            ValidationError: If required fields are missing or malformed
        """
        if not isinstance(data, dict):
            raise ValidationError("Invalid game data - expected an object")
        date = validate_date(date if date is not None else data.get('date'))

        title = data.get('title')
        if not isinstance(title, str) or not title.strip():
            raise ValidationError("Invalid game data - missing required fields")

        raw_levels = data.get('levels')
        if not isinstance(raw_levels, list) or len(raw_levels) != LEVEL_COUNT:
            raise ValidationError(f"A game must contain exactly {LEVEL_COUNT} levels")

        levels = [Level.from_dict(raw, number) for number, raw in enumerate(raw_levels, start=1)]
        return cls(id=date, date=date, title=title.strip(), levels=levels)


@dataclass
class GameSummary:
    """Calendar entry for a saved game."""
    date: str
    title: str
    id: str

    def to_dict(self) -> Dict[str, Any]:
        return {'date': self.date, 'title': self.title, 'id': self.id}
