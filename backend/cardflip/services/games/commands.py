"""Commands accepted by the match engine.

The socket shell (or any other input source) turns UI events into these
objects and hands them to ``MatchEngine.dispatch``.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class StartRound:
    player_name: str


@dataclass(frozen=True)
class SelectCard:
    position: Any


@dataclass(frozen=True)
class ResetRound:
    pass


@dataclass(frozen=True)
class RequestHint:
    pass


@dataclass(frozen=True)
class RefreshScores:
    pass


Command = (StartRound, SelectCard, ResetRound, RequestHint, RefreshScores)
