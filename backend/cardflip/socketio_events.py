from flask import current_app, request
from flask_socketio import emit
from cardflip import socketio
from cardflip.errors import ValidationError
from cardflip.main import feature_flags
from cardflip.services.games.commands import RefreshScores, RequestHint, ResetRound, SelectCard, StartRound
from cardflip.services.games.engine import MatchEngine
from cardflip.services.games.scheduler import BackgroundScheduler
from cardflip.services.remote.hints import build_hint_oracle
from cardflip.services.remote.scores import build_score_reporter
from typing import Dict

NAMESPACE = '/ws'

# One engine per connected socket
_engines: Dict[str, MatchEngine] = {}


def _get_sid() -> str:
    return request.sid  # type: ignore


def _sink_for(sid: str):
    def _emit(event, payload):
        # socketio.emit works from background tasks, outside request context
        socketio.emit(event, payload, to=sid, namespace=NAMESPACE)
    return _emit


def build_engine(sid: str, config) -> MatchEngine:
    return MatchEngine(
        _sink_for(sid),
        BackgroundScheduler(socketio),
        reporter=build_score_reporter(config),
        oracle=build_hint_oracle(config),
        mismatch_delay=int(config.get('MISMATCH_DELAY_MS', 900)) / 1000.0,
        tick_interval=float(config.get('TICK_INTERVAL_SEC', 1)),
        leaderboard_limit=int(config.get('LEADERBOARD_LIMIT', 10)),
    )


def _dispatch(command) -> None:
    engine = _engines.get(_get_sid())
    if engine is None:
        emit('error', {'message': 'Not connected'})
        return
    try:
        engine.dispatch(command)
    except ValidationError as exc:
        emit('error', {'message': str(exc)})


def handle_connect(auth=None):
    sid = _get_sid()
    engine = build_engine(sid, current_app.config)
    _engines[sid] = engine
    emit('connected', {'message': 'Connected to /ws', 'features': feature_flags(current_app.config)})
    emit('state_update', engine.snapshot())
    engine.refresh_scores()


def handle_disconnect(reason=None):
    engine = _engines.pop(_get_sid(), None)
    if engine is not None:
        engine.reset_round()


def handle_start_round(data):
    _dispatch(StartRound((data or {}).get('player_name')))


def handle_select_card(data):
    _dispatch(SelectCard((data or {}).get('position')))


def handle_reset_round(data=None):
    _dispatch(ResetRound())


def handle_request_hint(data=None):
    _dispatch(RequestHint())


def handle_fetch_scores(data=None):
    _dispatch(RefreshScores())


def register_socketio_handlers() -> None:
    """Register the game shell's Socket.IO event handlers on '/ws'."""
    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('disconnect', handle_disconnect, namespace=NAMESPACE)
    socketio.on_event('start_round', handle_start_round, namespace=NAMESPACE)
    socketio.on_event('select_card', handle_select_card, namespace=NAMESPACE)
    socketio.on_event('reset_round', handle_reset_round, namespace=NAMESPACE)
    socketio.on_event('request_hint', handle_request_hint, namespace=NAMESPACE)
    socketio.on_event('fetch_scores', handle_fetch_scores, namespace=NAMESPACE)
