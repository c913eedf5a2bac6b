from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


def feature_flags(config):
    """Public, secret-free view of the configuration for the browser shell."""
    return {
        'leaderboard': bool(config.get('SCORE_STORE_URL') and config.get('SCORE_STORE_KEY')),
        'hints': bool(config.get('HINT_ENDPOINT_URL')),
        'mismatch_delay_ms': int(config.get('MISMATCH_DELAY_MS', 900)),
        'leaderboard_limit': int(config.get('LEADERBOARD_LIMIT', 10)),
    }


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the card flip game server!'})


@main.route('/api/config')
def public_config():
    return jsonify(feature_flags(current_app.config))
