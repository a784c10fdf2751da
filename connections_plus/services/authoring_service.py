"""
Authoring Service

Builds a GameConfig level by level the way an operator authors it:
groups are typed in or generated, each of levels 1-3 gets a hand-picked
red herring, and level 4 gets the final group. Drafts live in memory until
they are published to the game store.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..config.game_settings import (
    DIFFICULTY_LEVELS, FINAL_GROUP_COLOR, FINAL_GROUP_DEFAULT_TITLE, FINAL_LEVEL,
    LEVEL_COUNT, WORDS_PER_GROUP, groups_required,
)
from ..models.puzzle import GameConfig, Level, WordGroup, normalize_word, validate_date
from ..utils.errors import NotFoundError, ValidationError
from ..utils.game_logger import game_logger
from .game_store import GameStore
from .word_generator import WordGenerator


@dataclass
class LevelDraft:
    """Groups authored so far for one level."""
    groups: List[WordGroup] = field(default_factory=list)
    red_herring: str = ""
    final_group: Optional[WordGroup] = None
    completed: bool = False

    def words(self) -> List[str]:
        words = [word for group in self.groups for word in group.words]
        if self.final_group is not None:
            words.extend(self.final_group.words)
        return words

    def to_dict(self) -> Dict[str, Any]:
        return {
            'groups': [group.to_dict() for group in self.groups],
            'redHerring': self.red_herring,
            'finalGroup': self.final_group.to_dict() if self.final_group else None,
            'completed': self.completed,
        }


def _normalize_words(words: Any) -> List[str]:
    if not isinstance(words, list) or len(words) != WORDS_PER_GROUP:
        raise ValidationError(f"A group needs exactly {WORDS_PER_GROUP} words")
    normalized = [normalize_word(word) for word in words]
    if len(set(normalized)) != WORDS_PER_GROUP:
        raise ValidationError("Words within a group must be unique")
    return normalized


class PuzzleDraft:
    """
    A partially authored game.

    Levels are addressed by number through ``self.levels``; the level
    currently being authored is ``current_level`` and earlier levels are
    frozen once completed.
    """

    def __init__(self, title: str, date: str, draft_id: Optional[str] = None):
        if not title or not str(title).strip():
            raise ValidationError("A draft needs a title")
        self.draft_id = draft_id or str(uuid.uuid4())
        self.title = str(title).strip()
        self.date = validate_date(date)
        self.current_level = 1
        self.levels: Dict[int, LevelDraft] = {n: LevelDraft() for n in range(1, LEVEL_COUNT + 1)}

    @property
    def complete(self) -> bool:
        return all(level.completed for level in self.levels.values())

    def _editable(self, level: int) -> LevelDraft:
        if level not in self.levels:
            raise ValidationError(f"Level must be between 1 and {LEVEL_COUNT}")
        draft = self.levels[level]
        if draft.completed:
            raise ValidationError(f"Level {level} is already complete")
        if level != self.current_level:
            raise ValidationError(f"Level {self.current_level} is being authored, not level {level}")
        return draft

    def add_group(self, level: int, title: str, words: List[str], difficulty: str = "") -> WordGroup:
        """Add a typed-in group to the level being authored."""
        draft = self._editable(level)
        if not title or not str(title).strip():
            raise ValidationError("A group needs a title")
        if difficulty is not None and not isinstance(difficulty, str):
            raise ValidationError("Difficulty must be a string")
        if len(draft.groups) >= groups_required(level):
            raise ValidationError(f"Level {level} already has {groups_required(level)} groups")

        normalized = _normalize_words(words)
        clashes = set(normalized) & set(draft.words())
        if clashes:
            raise ValidationError(f"Already used in level {level}: {', '.join(sorted(clashes))}")

        color = difficulty.lower() if difficulty and difficulty.lower() in DIFFICULTY_LEVELS else ""
        group = WordGroup(title=str(title).strip().upper(), words=normalized, color=color)
        draft.groups.append(group)
        return group

    def generate_group(self, level: int, category: str, difficulty: str,
                       generator: WordGenerator) -> WordGroup:
        """Ask the word generator for a group and add it to the level."""
        self._editable(level)
        words = generator.generate(category, difficulty)
        return self.add_group(level, category, words, difficulty)

    def remove_group(self, level: int, index: int) -> WordGroup:
        draft = self._editable(level)
        if not 0 <= index < len(draft.groups):
            raise NotFoundError(f"Level {level} has no group {index}")
        group = draft.groups.pop(index)
        if draft.red_herring in group.words:
            draft.red_herring = ""
        return group

    def set_red_herring(self, level: int, word: str) -> str:
        """Pick which of the level's words doubles as its red herring."""
        if level == FINAL_LEVEL:
            raise ValidationError("The final level has no red herring")
        draft = self._editable(level)
        word = normalize_word(word)
        if word not in draft.words():
            raise ValidationError(f"'{word}' is not one of level {level}'s words")
        draft.red_herring = word
        return word

    def set_final_group(self, words: List[str], title: str = FINAL_GROUP_DEFAULT_TITLE) -> WordGroup:
        """
        Author the final group of level 4.

        By convention these are the three red herrings plus one more word,
        but the overlap is not enforced.
        """
        draft = self._editable(FINAL_LEVEL)
        normalized = _normalize_words(words)
        real_words = {word for group in draft.groups for word in group.words}
        clashes = set(normalized) & real_words
        if clashes:
            raise ValidationError(f"Already used in level {FINAL_LEVEL}: {', '.join(sorted(clashes))}")
        draft.final_group = WordGroup(
            title=(str(title).strip() or FINAL_GROUP_DEFAULT_TITLE).upper(),
            words=normalized,
            color=FINAL_GROUP_COLOR,
        )
        return draft.final_group

    def red_herrings(self) -> List[str]:
        return [self.levels[n].red_herring for n in range(1, FINAL_LEVEL) if self.levels[n].red_herring]

    def complete_level(self) -> int:
        """
        Freeze the level being authored and move on.

        Returns:
            The number of the next level to author (LEVEL_COUNT + 1 when done)
        """
        level = self.current_level
        draft = self._editable(level)
        required = groups_required(level)
        if len(draft.groups) != required:
            raise ValidationError(f"Please create {required} groups before completing level {level}")
        if level == FINAL_LEVEL:
            if draft.final_group is None:
                raise ValidationError("Please author the final group before completing the last level")
        elif not draft.red_herring:
            raise ValidationError(f"Please choose a red herring for level {level}")

        draft.completed = True
        self.current_level = level + 1
        return self.current_level

    def build(self) -> GameConfig:
        """Assemble the finished GameConfig."""
        if not self.complete:
            raise ValidationError(f"Level {self.current_level} is not complete yet")
        levels = []
        for number in range(1, LEVEL_COUNT + 1):
            draft = self.levels[number]
            groups = list(draft.groups)
            if number == FINAL_LEVEL:
                groups.append(draft.final_group)
            levels.append(Level(groups=groups, red_herring=draft.red_herring))
        config = GameConfig(id=self.date, date=self.date, title=self.title, levels=levels)
        # Same shape checks as PUT /api/games/<date>
        return GameConfig.from_dict(config.to_dict(), date=self.date)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'draftId': self.draft_id,
            'title': self.title,
            'date': self.date,
            'currentLevel': self.current_level,
            'complete': self.complete,
            'redHerrings': self.red_herrings(),
            'levels': {str(number): draft.to_dict() for number, draft in self.levels.items()},
        }


class AuthoringService:
    """
    Keeps drafts by id and publishes finished ones to the game store.
    """

    def __init__(self, game_store: GameStore, word_generator: Optional[WordGenerator] = None):
        self.game_store = game_store
        self.word_generator = word_generator
        self.drafts: Dict[str, PuzzleDraft] = {}

    def create_draft(self, title: str, date: str) -> PuzzleDraft:
        draft = PuzzleDraft(title, date)
        self.drafts[draft.draft_id] = draft
        game_logger.logger.info(f"Draft {draft.draft_id} created for {draft.date}")
        return draft

    def get_draft(self, draft_id: str) -> PuzzleDraft:
        draft = self.drafts.get(draft_id)
        if draft is None:
            raise NotFoundError("Draft not found")
        return draft

    def discard_draft(self, draft_id: str) -> None:
        self.get_draft(draft_id)
        del self.drafts[draft_id]

    def generate_group(self, draft_id: str, level: int, category: str, difficulty: str) -> WordGroup:
        draft = self.get_draft(draft_id)
        if self.word_generator is None:
            raise ValidationError("Word generation is not available")
        return draft.generate_group(level, category, difficulty, self.word_generator)

    def publish(self, draft_id: str) -> GameConfig:
        """Save a finished draft under its date (overwriting) and drop it."""
        draft = self.get_draft(draft_id)
        config = draft.build()
        self.game_store.save_game_config(config)
        del self.drafts[draft_id]
        game_logger.logger.info(f"Draft {draft_id} published as game {config.date}")
        return config


# Global service instance
_authoring_service = None


def get_authoring_service() -> Optional[AuthoringService]:
    """Get the global authoring service instance."""
    return _authoring_service


def initialize_authoring_service(game_store: GameStore,
                                 word_generator: Optional[WordGenerator] = None) -> AuthoringService:
    """Initialize the global authoring service instance."""
    global _authoring_service
    _authoring_service = AuthoringService(game_store, word_generator)
    return _authoring_service
