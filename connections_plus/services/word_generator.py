"""
Word Generator

Asks Claude for four words belonging to a category at a given difficulty.
One request per call, no retries: a failed or malformed answer is reported
to the operator, who can simply ask again.
"""

from typing import List, Optional

import anthropic

from ..config.game_settings import WORDS_PER_GROUP, describe_difficulty
from ..utils.errors import ValidationError, WordGenerationError
from ..utils.game_logger import game_logger

PROMPT_TEMPLATE = """You are helping create a word puzzle game similar to Connections. I need exactly 4 words that belong to the category "{category}".

Requirements:
- Exactly 4 words, no more, no less
- All words should be single words (no phrases or compound words with spaces)
- Words should be {description} examples of the category
- Words should be UPPERCASE
- Return ONLY the 4 words separated by commas, nothing else

Category: {category}
Difficulty level: {difficulty} ({description})

Example response format: WORD1, WORD2, WORD3, WORD4"""


def parse_words(text: str) -> List[str]:
    """
    Extract the generated words from a model reply.

    Raises:
        WordGenerationError: Unless the reply holds exactly four single words
    """
    words = [word.strip().upper() for word in (text or "").split(",")]
    words = [word for word in words if word]
    if len(words) != WORDS_PER_GROUP or any(len(word.split()) != 1 for word in words):
        raise WordGenerationError(f"Failed to generate exactly {WORDS_PER_GROUP} words")
    return words


class WordGenerator:
    """Client for Claude word generation using the official SDK."""

    def __init__(self, api_key: Optional[str] = None,
                 model: str = "claude-3-5-sonnet-20241022",
                 max_tokens: int = 100, client=None):
        """
        Initialize the generator.

        Args:
            api_key: Anthropic API key
            model: Claude model name
            max_tokens: Max response tokens
            client: Pre-built Anthropic client (tests)
        """
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.client = client
        if self.client is None and api_key:
            self.client = anthropic.Anthropic(api_key=api_key)

    def generate(self, category: str, difficulty: str) -> List[str]:
        """
        Generate one group of words.

        Args:
            category: Category the words must belong to
            difficulty: Difficulty key (yellow, green, blue, purple)

        Returns:
            Four uppercase words

        Raises:
            ValidationError: If category or difficulty is missing
            WordGenerationError: If the API is unavailable or answers badly
        """
        if not category or not difficulty:
            raise ValidationError("Category and difficulty are required")
        if not isinstance(category, str) or not isinstance(difficulty, str):
            raise ValidationError("Category and difficulty must be strings")
        if self.client is None:
            raise WordGenerationError("ANTHROPIC_API_KEY not configured")

        prompt = PROMPT_TEMPLATE.format(
            category=category,
            difficulty=difficulty,
            description=describe_difficulty(difficulty),
        )

        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as e:
            game_logger.logger.error(f"Word generation API error for '{category}': {e}")
            raise WordGenerationError("Failed to generate words from Claude API") from e

        raw_text = response.content[0].text if response.content else ""
        words = parse_words(raw_text)
        game_logger.logger.info(f"Generated words for '{category}' ({difficulty}): {len(words)}")
        return words


# Global service instance
_word_generator = None


def get_word_generator() -> Optional[WordGenerator]:
    """Get the global word generator instance."""
    return _word_generator


def initialize_word_generator(api_key: Optional[str] = None, model: str = "claude-3-5-sonnet-20241022",
                              max_tokens: int = 100, client=None) -> WordGenerator:
    """Initialize the global word generator instance."""
    global _word_generator
    _word_generator = WordGenerator(api_key, model=model, max_tokens=max_tokens, client=client)
    return _word_generator
