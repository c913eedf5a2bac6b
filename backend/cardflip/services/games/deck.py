import random
from typing import Optional, Sequence, Tuple

from cardflip.errors import ValidationError


CARD_FACES: Tuple[str, ...] = (
    "\U0001F34E",  # apple
    "\U0001F34A",  # tangerine
    "\U0001F347",  # grapes
    "\U0001F349",  # watermelon
    "\U0001F95D",  # kiwi
    "\U0001F353",  # strawberry
    "\U0001F34D",  # pineapple
    "\U0001F351",  # peach
)

Deck = Tuple[str, ...]


def shuffle(items: Sequence, rng: Optional[random.Random] = None) -> list:
    """Return a Fisher-Yates shuffled copy of ``items``."""
    rng = rng or random.Random()
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = rng.randrange(i + 1)
        result[i], result[j] = result[j], result[i]
    return result


def generate(symbols: Sequence[str] = CARD_FACES, rng: Optional[random.Random] = None) -> Deck:
    """Build a shuffled deck holding every symbol exactly twice.

    Symbols must be distinct; the same RNG seed always yields the same deck.
    """
    if len(set(symbols)) != len(symbols):
        raise ValidationError('Deck symbols must be distinct')
    return tuple(shuffle(list(symbols) * 2, rng))
