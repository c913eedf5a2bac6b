from flask import Blueprint, current_app, jsonify, request
from cardflip.errors import ConfigurationError, NetworkError
from cardflip.services.hints.generator import HintGenerator

hints = Blueprint('hints', __name__)


def _int_list(values):
    return [int(v) for v in values or []]


@hints.route('', methods=['POST'])
def request_hint():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'Invalid JSON payload.'}), 400

    try:
        deck = [str(face) for face in data.get('deck') or []]
        matched = _int_list(data.get('matchedIndices'))
        flipped = _int_list(data.get('flippedIndices'))
        moves = int(data.get('moves') or 0)
    except (TypeError, ValueError):
        return jsonify({'error': 'Invalid JSON payload.'}), 400

    try:
        generator = current_app.extensions.get('cardflip_hints') or HintGenerator.from_config(current_app.config)
    except ConfigurationError as exc:
        return jsonify({'error': str(exc)}), 500

    try:
        hint = generator.generate(deck, matched, flipped, moves)
    except NetworkError as exc:
        current_app.logger.warning(f"[hint] upstream failure: {exc}")
        return jsonify({'error': 'Failed to fetch hint from OpenAI.', 'details': str(exc)}), 500
    return jsonify({'hint': hint})
