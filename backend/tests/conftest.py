import os
import sys
import pytest

# Ensure the backend root (containing the `cardflip` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from cardflip import create_app, db, socketio
from cardflip.services.games.clock import GameClock
from cardflip.services.games.engine import MatchEngine
from cardflip.services.games.scheduler import ScheduledTask


APPLE = '\U0001F34E'
ORANGE = '\U0001F34A'


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = ['http://localhost:5173']
    MISMATCH_DELAY_MS = 900
    TICK_INTERVAL_SEC = 1
    LEADERBOARD_LIMIT = 10


class ManualScheduler:
    """Deterministic stand-in for BackgroundScheduler.

    Delayed callbacks wait until ``advance`` moves the fake time past their
    due time. Spawned work runs inline unless ``defer_spawn`` is set, in which
    case it waits for ``run_spawned``.
    """

    def __init__(self, defer_spawn=False):
        self.now = 0.0
        self.defer_spawn = defer_spawn
        self.spawned = []
        self._queue = []
        self._seq = 0

    def call_later(self, delay, fn, *args, name='task'):
        task = ScheduledTask(name, delay)
        self._seq += 1
        self._queue.append((self.now + delay, self._seq, task, fn, args))
        return task

    def spawn(self, fn, *args):
        if self.defer_spawn:
            self.spawned.append((fn, args))
        else:
            fn(*args)

    def run_spawned(self):
        work, self.spawned = self.spawned, []
        for fn, args in work:
            fn(*args)

    def advance(self, seconds, include_cancelled=False):
        target = self.now + seconds
        while True:
            due = [item for item in self._queue if item[0] <= target + 1e-9]
            if not due:
                break
            item = min(due, key=lambda i: (i[0], i[1]))
            self._queue.remove(item)
            when, _, task, fn, args = item
            self.now = when
            if task.cancelled and not include_cancelled:
                continue
            task.fired = True
            fn(*args)
        self.now = target

    def pending(self, name=None):
        return [item[2] for item in self._queue
                if not item[2].cancelled and (name is None or item[2].name == name)]


class EventRecorder:
    """Display sink that remembers everything the engine emitted."""

    def __init__(self):
        self.events = []

    def __call__(self, event, payload):
        self.events.append((event, payload))

    def named(self, event):
        return [payload for name, payload in self.events if name == event]

    def last(self, event):
        payloads = self.named(event)
        return payloads[-1] if payloads else None

    def clear(self):
        self.events = []


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import cardflip.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def events():
    return EventRecorder()


@pytest.fixture()
def make_engine(scheduler, events):
    def _make(deck=None, **kwargs):
        if deck is not None:
            kwargs.setdefault('deck_factory', lambda symbols: tuple(deck))
        kwargs.setdefault('clock', GameClock(now=lambda: scheduler.now))
        return MatchEngine(events, scheduler, **kwargs)
    return _make


@pytest.fixture()
def small_deck():
    return (APPLE, ORANGE, APPLE, ORANGE)
