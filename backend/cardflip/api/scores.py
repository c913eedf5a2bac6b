from flask import Blueprint, current_app, jsonify, request
from cardflip import db
from cardflip.models import ScoreRecord

scores = Blueprint('scores', __name__)

MAX_LIMIT = 100


def _authorized() -> bool:
    expected = current_app.config.get('SCORE_STORE_KEY')
    if not expected:
        return True
    supplied = request.headers.get('apikey')
    if not supplied:
        auth = request.headers.get('Authorization', '')
        if auth.startswith('Bearer '):
            supplied = auth[len('Bearer '):]
    return supplied == expected


def _recent(limit) -> list:
    try:
        limit = int(limit)
    except (TypeError, ValueError):
        limit = int(current_app.config.get('LEADERBOARD_LIMIT', 10))
    limit = max(1, min(limit, MAX_LIMIT))
    rows = ScoreRecord.query.order_by(ScoreRecord.completed_at.desc(), ScoreRecord.id.desc()).limit(limit).all()
    return [row.to_dict() for row in rows]


def _create(data):
    player_name = data.get('player_name')
    if not isinstance(player_name, str) or not player_name.strip():
        return jsonify({'error': 'player_name is required'}), 400
    player_name = player_name.strip()
    attempts = data.get('attempts', data.get('moves', 0))
    counts = (attempts, data.get('matches'), data.get('elapsed_seconds'))
    if any(isinstance(value, bool) for value in counts):
        return jsonify({'error': 'attempts, matches and elapsed_seconds must be integers'}), 400
    try:
        record = ScoreRecord(
            player_name=player_name[:64],
            attempts=int(attempts or 0),
            matches=int(data.get('matches') or 0),
            elapsed_seconds=int(data.get('elapsed_seconds') or 0),
        )
    except (TypeError, ValueError):
        return jsonify({'error': 'attempts, matches and elapsed_seconds must be integers'}), 400
    db.session.add(record)
    db.session.commit()
    current_app.logger.info(f"[score-store] saved player={record.player_name} attempts={record.attempts}")
    return jsonify({'ok': True}), 201


@scores.route('', methods=['GET'])
def list_scores():
    if not _authorized():
        return jsonify({'error': 'Invalid score store key'}), 401
    return jsonify(_recent(request.args.get('limit')))


@scores.route('', methods=['POST'])
def post_score():
    """Append a score.

    Also accepts the action envelope used by the old proxy:
    ``{"action": "submitScore", ...}`` or ``{"action": "fetchScores"}``.
    """
    if not _authorized():
        return jsonify({'error': 'Invalid score store key'}), 401
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'Invalid JSON payload'}), 400

    action = data.get('action')
    if action is None or action == 'submitScore':
        return _create(data)
    if action == 'fetchScores':
        return jsonify(_recent(data.get('limit')))
    return jsonify({'error': 'Unknown action'}), 400
