"""
Puzzle Engine

Pure transition functions for the Connections Plus state machine.

Every function takes a PuzzleState (and the day's GameConfig where it needs
the authored groups) and returns a new PuzzleState. Randomness is injected
as a random.Random so shuffles are reproducible in tests.

States:  PLAYING(level) -> LEVEL_COMPLETE(level) -> PLAYING(level + 1)
         LEVEL_COMPLETE(4) -> ALL_COMPLETE -> (restart) -> PLAYING(1)
"""

import random
from dataclasses import replace
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Sequence

from ..config.game_settings import (
    DEFAULT_RATING, FINAL_LEVEL, MISTAKES_PER_LEVEL, RATING_LABELS, WORDS_PER_GROUP,
)
from ..models.game import GuessOutcome, GuessResult, Phase, PuzzleState
from ..models.puzzle import GameConfig

INCORRECT_MESSAGE = "Not quite right. Try again!"
FINAL_LEVEL_COMPLETE_MESSAGE = "Level 4 complete! Revealing the final group..."
ALL_COMPLETE_MESSAGE = "INCREDIBLE! You discovered the secret red herring group!"


def rating_for(mistakes: int) -> str:
    """Rating label for a finished level."""
    return RATING_LABELS.get(mistakes, DEFAULT_RATING)


def _unique(words: Iterable[str]) -> List[str]:
    seen = set()
    ordered = []
    for word in words:
        if word and word not in seen:
            seen.add(word)
            ordered.append(word)
    return ordered


def playable_words(config: GameConfig, level: int, accumulated: Sequence[str]) -> List[str]:
    """
    Tile set for a level, deduplicated, in a stable order.

    Levels 1-3 add every red herring collected so far plus the level's own
    red herring as loose tiles. The level's own red herring is also a word
    of one of its groups, so it collapses into a single tile here while
    keeping its group membership for matching. The final level's groups
    already contain the collected red herrings.
    """
    level_config = config.level(level)
    words = level_config.all_words()
    if level == FINAL_LEVEL:
        return _unique(words)
    return _unique(words + list(accumulated) + [level_config.red_herring])


def _shuffled(words: Sequence[str], rng: random.Random) -> tuple:
    tiles = list(words)
    rng.shuffle(tiles)
    return tuple(tiles)


def _level_start(config: GameConfig, level: int, accumulated: Sequence[str],
                 rng: random.Random, **fields: Any) -> PuzzleState:
    tiles = _shuffled(playable_words(config, level, accumulated), rng)
    return PuzzleState(
        current_level=level,
        tiles=tiles,
        accumulated_red_herrings=tuple(accumulated),
        **fields
    )


def new_game(config: GameConfig, rng: Optional[random.Random] = None) -> PuzzleState:
    """Initial state: level 1, full mistakes, nothing solved or collected."""
    return _level_start(config, 1, (), rng or random.Random())


def restart(config: GameConfig, rng: Optional[random.Random] = None) -> PuzzleState:
    """Throw away all progress and start again from level 1."""
    return new_game(config, rng)


def solved_words(state: PuzzleState, config: GameConfig) -> FrozenSet[str]:
    level_config = config.level(state.current_level)
    return frozenset(
        word
        for index in state.solved_group_indices
        for word in level_config.groups[index].words
    )


def visible_tiles(state: PuzzleState, config: GameConfig) -> List[str]:
    """Tiles still on the board, in shuffled order."""
    solved = solved_words(state, config)
    return [word for word in state.tiles if word not in solved]


def shuffle(state: PuzzleState, rng: Optional[random.Random] = None) -> PuzzleState:
    """Reorder the tiles and clear the selection."""
    return replace(state, tiles=_shuffled(state.tiles, rng or random.Random()), selected_words=())


def toggle_word(state: PuzzleState, config: GameConfig, word: str) -> PuzzleState:
    """
    Select or deselect a tile.

    Selecting a fifth word, a solved word or a word not on the board is a
    no-op, as is any click outside the PLAYING phase.
    """
    if state.phase is not Phase.PLAYING:
        return state
    word = (word or "").strip().upper()
    if word in state.selected_words:
        return replace(
            state,
            selected_words=tuple(w for w in state.selected_words if w != word),
        )
    if len(state.selected_words) >= WORDS_PER_GROUP:
        return state
    if word not in visible_tiles(state, config):
        return state
    return replace(state, selected_words=state.selected_words + (word,))


def deselect_all(state: PuzzleState) -> PuzzleState:
    return replace(state, selected_words=())


def match_group(config: GameConfig, level: int, words: Iterable[str],
                skip: Iterable[int] = ()) -> Optional[int]:
    """
    Index of the first group whose word set equals ``words``.

    Matching is set equality: order does not matter and proper subsets or
    supersets never match. Groups are tried in authoring order.
    """
    guess = frozenset(words)
    skipped = set(skip)
    for index, group in enumerate(config.level(level).groups):
        if index in skipped:
            continue
        if group.word_set() == guess:
            return index
    return None


def submit_guess(state: PuzzleState, config: GameConfig) -> GuessResult:
    """Evaluate the current selection against the level's unsolved groups."""
    if state.phase is not Phase.PLAYING or len(state.selected_words) != WORDS_PER_GROUP:
        return GuessResult(state=state, outcome=GuessOutcome.IGNORED)

    guessed = state.selected_words
    index = match_group(config, state.current_level, guessed, skip=state.solved_group_indices)

    if index is None:
        new_state = replace(
            state,
            selected_words=(),
            mistakes_remaining=max(state.mistakes_remaining - 1, 0),
            total_mistakes=state.total_mistakes + 1,
            message=INCORRECT_MESSAGE,
        )
        return GuessResult(state=new_state, outcome=GuessOutcome.INCORRECT, guessed_words=guessed)

    level_config = config.level(state.current_level)
    group = level_config.groups[index]
    solved = state.solved_group_indices + (index,)
    new_state = replace(
        state,
        selected_words=(),
        solved_group_indices=solved,
        completed_groups=state.completed_groups + (tuple(group.words),),
        message=f"Correct! You found the {group.title} group!",
    )

    if len(solved) < len(level_config.groups):
        return GuessResult(state=new_state, outcome=GuessOutcome.CORRECT, group=group, guessed_words=guessed)

    if state.current_level == FINAL_LEVEL:
        message = FINAL_LEVEL_COMPLETE_MESSAGE
    else:
        mistakes = new_state.mistakes_made
        plural = "" if mistakes == 1 else "s"
        message = (
            f"{rating_for(mistakes)} Level {state.current_level} complete "
            f"with {mistakes} mistake{plural}!"
        )
    new_state = replace(new_state, game_complete=True, message=message)
    return GuessResult(state=new_state, outcome=GuessOutcome.LEVEL_COMPLETE, group=group, guessed_words=guessed)


def advance(state: PuzzleState, config: GameConfig,
            rng: Optional[random.Random] = None) -> PuzzleState:
    """
    Leave a completed level.

    Levels 1-3 hand their red herring to the accumulation and start the next
    level with a fresh mistake budget. The final level ends the game.
    """
    if state.phase is not Phase.LEVEL_COMPLETE:
        return state

    level = state.current_level
    if level == FINAL_LEVEL:
        return replace(state, all_levels_complete=True, message=ALL_COMPLETE_MESSAGE)

    accumulated = state.accumulated_red_herrings
    red_herring = config.level(level).red_herring
    if red_herring:
        accumulated = accumulated + (red_herring,)

    return _level_start(
        config, level + 1, accumulated, rng or random.Random(),
        mistakes_remaining=MISTAKES_PER_LEVEL,
        total_mistakes=state.total_mistakes,
        completed_groups=state.completed_groups,
        message=f"Level {level} complete! Advancing to Level {level + 1}...",
    )


def state_view(state: PuzzleState, config: GameConfig) -> Dict[str, Any]:
    """Client-facing view of a state: the board plus solved groups."""
    level_config = config.level(state.current_level)
    view = state.to_dict()
    view['tiles'] = visible_tiles(state, config)
    view['solved_groups'] = [
        level_config.groups[index].to_dict() for index in state.solved_group_indices
    ]
    view['group_count'] = len(level_config.groups)
    if state.phase is Phase.LEVEL_COMPLETE and state.current_level != FINAL_LEVEL:
        view['rating'] = rating_for(state.mistakes_made)
    return view
