import logging
from typing import Any, Mapping, Optional

import openai

from cardflip.errors import ConfigurationError, NetworkError

logger = logging.getLogger(__name__)


def build_prompt(deck, matched_indices, flipped_indices, moves: int) -> str:
    """Describe the board for the model: counts, the index:face map, and the open cards."""
    state_summary = (
        f"Total cards: {len(deck)}, matched cards: {len(matched_indices)}, "
        f"currently flipped: {len(flipped_indices)}, moves: {moves}"
    )
    face_map = ', '.join(f"#{index}:{face}" for index, face in enumerate(deck))
    matched_list = ', '.join(str(i) for i in matched_indices)
    flipped_list = ', '.join(str(i) for i in flipped_indices)

    return (
        "You are a helpful assistant for a memory card game. Give the player a short strategy tip "
        "(2-3 sentences). Follow the rules:\n"
        "- Identical cards remain face up when matched.\n"
        "- The goal is to minimise the number of moves.\n\n"
        f"Game state summary: {state_summary}\n"
        f"Deck (index:face): {face_map}\n"
        f"Matched indices: {matched_list}\n"
        f"Currently flipped indices: {flipped_list}\n\n"
        "Provide one practical hint that helps the player remember or reason about the remaining cards."
    )


class HintGenerator:
    """Turns a board state into a tip using an OpenAI chat model."""

    def __init__(self, api_key: Optional[str], model: str = 'gpt-4o', max_tokens: int = 200,
                 temperature: float = 0.7, timeout: float = 20.0, language: str = 'English', client=None):
        if not api_key and client is None:
            raise ConfigurationError('OPENAI_API_KEY environment variable is not set.')
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.language = language
        self._client = client or openai.OpenAI(api_key=api_key, timeout=timeout)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> 'HintGenerator':
        return cls(
            config.get('OPENAI_API_KEY'),
            model=config.get('HINT_MODEL', 'gpt-4o'),
            max_tokens=int(config.get('HINT_MAX_TOKENS', 200)),
            temperature=float(config.get('HINT_TEMPERATURE', 0.7)),
            timeout=float(config.get('HINT_TIMEOUT_SEC', 20)),
            language=config.get('HINT_LANGUAGE', 'English'),
        )

    def generate(self, deck, matched_indices, flipped_indices, moves: int) -> str:
        prompt = build_prompt(deck, matched_indices, flipped_indices, moves)
        try:
            response = self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {'role': 'system', 'content': f'You give concise, encouraging card-matching tips. Reply in {self.language}.'},
                    {'role': 'user', 'content': prompt},
                ],
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except openai.OpenAIError as exc:
            raise NetworkError(str(exc)) from exc

        choices = getattr(response, 'choices', None) or []
        content = choices[0].message.content if choices else None
        if not content:
            raise NetworkError('No message content in OpenAI response.')
        logger.info(f"[hint] generated model={self.model} moves={moves}")
        return content.strip()
