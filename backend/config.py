import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///cardflip.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = [o for o in os.environ.get(
        'CORS_ORIGINS',
        'http://localhost:5173,http://127.0.0.1:5173,http://localhost:5174,http://127.0.0.1:5174',
    ).split(',') if o]
    # Leaderboard: both values are required, otherwise the feature is off
    SCORE_STORE_URL = os.environ.get('SCORE_STORE_URL')
    SCORE_STORE_KEY = os.environ.get('SCORE_STORE_KEY')
    LEADERBOARD_LIMIT = int(os.environ.get('LEADERBOARD_LIMIT', '10'))
    # Hints: the client endpoint, and the upstream model used by /api/hint
    HINT_ENDPOINT_URL = os.environ.get('HINT_ENDPOINT_URL')
    OPENAI_API_KEY = os.environ.get('OPENAI_API_KEY')
    HINT_MODEL = os.environ.get('HINT_MODEL', 'gpt-4o')
    HINT_MAX_TOKENS = int(os.environ.get('HINT_MAX_TOKENS', '200'))
    HINT_TEMPERATURE = float(os.environ.get('HINT_TEMPERATURE', '0.7'))
    HINT_TIMEOUT_SEC = float(os.environ.get('HINT_TIMEOUT_SEC', '20'))
    HINT_LANGUAGE = os.environ.get('HINT_LANGUAGE', 'English')
    # How long a mismatched pair stays face up (ms)
    MISMATCH_DELAY_MS = int(os.environ.get('MISMATCH_DELAY_MS', '900'))
    # Timer display refresh (sec)
    TICK_INTERVAL_SEC = float(os.environ.get('TICK_INTERVAL_SEC', '1'))
