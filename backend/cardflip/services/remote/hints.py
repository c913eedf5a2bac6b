import logging
from typing import Any, Dict, Mapping, Optional

import requests

from cardflip.errors import ConfigurationError, NetworkError

logger = logging.getLogger(__name__)

FALLBACK_HINT = "Couldn't come up with a hint this time."


class HttpHintOracle:
    """Client for the hint endpoint.

    The endpoint answers ``{"hint": ...}``; ``{"message": ...}`` is accepted
    as a fallback.
    """

    def __init__(self, endpoint_url: Optional[str], session=None):
        if not endpoint_url:
            raise ConfigurationError('Hint endpoint URL is not configured')
        self.endpoint_url = endpoint_url
        self._session = session or requests.Session()

    def request_hint(self, state: Dict[str, Any]) -> str:
        try:
            response = self._session.post(self.endpoint_url, json=state)
        except requests.RequestException as exc:
            raise NetworkError(f'Hint request failed: {exc}') from exc
        if not response.ok:
            raise NetworkError(f'Hint request failed ({response.status_code})')
        try:
            data = response.json()
        except ValueError as exc:
            raise NetworkError('Hint endpoint returned invalid JSON') from exc
        if not isinstance(data, Mapping):
            return FALLBACK_HINT
        return data.get('hint') or data.get('message') or FALLBACK_HINT


def build_hint_oracle(config: Mapping[str, Any], session=None) -> Optional[HttpHintOracle]:
    try:
        return HttpHintOracle(config.get('HINT_ENDPOINT_URL'), session=session)
    except ConfigurationError as exc:
        logger.info(f"[config] hints disabled: {exc}")
        return None
