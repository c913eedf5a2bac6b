import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

import requests

from cardflip.errors import ConfigurationError, NetworkError
from cardflip.services.games.clock import format_elapsed

logger = logging.getLogger(__name__)

SCORES_PATH = '/api/scores'


@dataclass(frozen=True)
class ScoreSummary:
    """What a won round leaves behind."""
    player_name: str
    move_count: int
    elapsed_seconds: int
    match_count: int

    @classmethod
    def from_round(cls, player_name: str, move_count: int, elapsed_ms: int, match_count: int) -> 'ScoreSummary':
        # Round half up, whole seconds
        return cls(player_name, move_count, (max(0, elapsed_ms) + 500) // 1000, match_count)

    def to_payload(self) -> Dict[str, Any]:
        return {
            'player_name': self.player_name,
            'attempts': self.move_count,
            'matches': self.match_count,
            'elapsed_seconds': self.elapsed_seconds,
        }


def _int_or_none(value: Any) -> Optional[int]:
    # bool is an int subclass but never a valid count
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


@dataclass(frozen=True)
class ScoreEntry:
    player_name: str
    attempts: Optional[int]
    matches: Optional[int]
    elapsed_seconds: Optional[int]
    completed_at: Optional[str]

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> 'ScoreEntry':
        attempts = _int_or_none(row.get('attempts'))
        if attempts is None:
            attempts = _int_or_none(row.get('moves'))
        return cls(
            player_name=str(row.get('player_name') or ''),
            attempts=attempts,
            matches=_int_or_none(row.get('matches')),
            elapsed_seconds=_int_or_none(row.get('elapsed_seconds')),
            completed_at=row.get('completed_at') or row.get('created_at') or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'player_name': self.player_name,
            'attempts': self.attempts if self.attempts is not None else '-',
            'matches': self.matches if self.matches is not None else '-',
            'duration': format_elapsed(self.elapsed_seconds * 1000) if self.elapsed_seconds is not None else '-',
            'completed_at': self.completed_at or '-',
        }


class HttpScoreReporter:
    """Leaderboard client for the score store API.

    The key is sent both as ``apikey`` and as a bearer token; the store
    accepts either.
    """

    def __init__(self, base_url: Optional[str], api_key: Optional[str], session=None, path: str = SCORES_PATH):
        if not base_url or not api_key:
            raise ConfigurationError('Score store URL and key are both required')
        self.url = base_url.rstrip('/') + path
        self._api_key = api_key
        self._session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        return {
            'apikey': self._api_key,
            'Authorization': f'Bearer {self._api_key}',
        }

    def submit(self, summary: ScoreSummary) -> None:
        try:
            response = self._session.post(self.url, json=summary.to_payload(), headers=self._headers())
        except requests.RequestException as exc:
            raise NetworkError(f'Score insert failed: {exc}') from exc
        if not response.ok:
            raise NetworkError(f'Score insert failed ({response.status_code})')
        logger.info(f"[score-submit] player={summary.player_name} moves={summary.move_count}")

    def fetch_recent(self, limit: int = 10) -> List[ScoreEntry]:
        try:
            response = self._session.get(self.url, params={'limit': limit}, headers=self._headers())
        except requests.RequestException as exc:
            raise NetworkError(f'Score fetch failed: {exc}') from exc
        if not response.ok:
            raise NetworkError(f'Score fetch failed ({response.status_code})')
        try:
            rows = response.json()
        except ValueError as exc:
            raise NetworkError('Score store returned invalid JSON') from exc
        if not isinstance(rows, list):
            raise NetworkError('Score store returned an unexpected payload')
        return [ScoreEntry.from_row(row) for row in rows if isinstance(row, Mapping)]


def build_score_reporter(config: Mapping[str, Any], session=None) -> Optional[HttpScoreReporter]:
    """Return a reporter for the configured store, or None when the leaderboard is off."""
    try:
        return HttpScoreReporter(config.get('SCORE_STORE_URL'), config.get('SCORE_STORE_KEY'), session=session)
    except ConfigurationError as exc:
        logger.info(f"[config] leaderboard disabled: {exc}")
        return None
