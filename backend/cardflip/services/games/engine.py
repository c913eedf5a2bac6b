import enum
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Set

from cardflip.errors import CardFlipError, NetworkError, ValidationError
from cardflip.services.remote.scores import ScoreSummary
from .clock import ClockHandle, GameClock, format_elapsed
from .commands import RefreshScores, RequestHint, ResetRound, SelectCard, StartRound
from .deck import CARD_FACES, Deck, generate

logger = logging.getLogger(__name__)

Emit = Callable[[str, Dict[str, Any]], None]


class Phase(str, enum.Enum):
    IDLE = 'idle'
    ACTIVE = 'active'
    RESOLVING = 'resolving'
    WON = 'won'


class MatchEngine:
    """State machine for one player's board.

    The engine owns all round state. Every change is pushed to ``emit``
    (the display sink) as a ``state_update`` snapshot; timers and network
    calls go through ``scheduler`` and are tied to the round generation, so
    a callback from an earlier round never touches the current one.
    """

    def __init__(
        self,
        emit: Emit,
        scheduler,
        reporter=None,
        oracle=None,
        clock: Optional[GameClock] = None,
        symbols: Sequence[str] = CARD_FACES,
        deck_factory: Callable[[Sequence[str]], Sequence[str]] = generate,
        mismatch_delay: float = 0.9,
        tick_interval: float = 1.0,
        leaderboard_limit: int = 10,
    ):
        self._emit = emit
        self._scheduler = scheduler
        self.reporter = reporter
        self.oracle = oracle
        self._clock = clock or GameClock()
        self._symbols = tuple(symbols)
        self._deck_factory = deck_factory
        self.mismatch_delay = mismatch_delay
        self.tick_interval = tick_interval
        self.leaderboard_limit = leaderboard_limit

        self.generation = 0
        self.phase = Phase.IDLE
        self.player_name = ''
        self.deck: Deck = ()
        self.selected: List[int] = []
        self.matched: Set[int] = set()
        self.moves = 0
        self.hint_pending = False
        self._clock_handle: Optional[ClockHandle] = None
        self._ticks = None
        self._pending_tasks: list = []

    # ---- commands ----

    def dispatch(self, command) -> None:
        if isinstance(command, StartRound):
            self.start_round(command.player_name)
        elif isinstance(command, SelectCard):
            self.select_card(command.position)
        elif isinstance(command, ResetRound):
            self.reset_round()
        elif isinstance(command, RequestHint):
            self.request_hint()
        elif isinstance(command, RefreshScores):
            self.refresh_scores()
        else:
            raise CardFlipError(f'Unknown command: {command!r}')

    def start_round(self, player_name: Optional[str]) -> None:
        name = (player_name or '').strip()
        if not name:
            raise ValidationError('Please enter a player name first.')

        self._clear_round()
        self.player_name = name
        self.deck = tuple(self._deck_factory(self._symbols))
        self.phase = Phase.ACTIVE
        self._clock_handle = self._clock.start()
        self._ticks = self._clock.ticks(self._clock_handle)
        self._schedule_tick()
        logger.info(f"[round-start] player={name} generation={self.generation} cards={len(self.deck)}")
        self._render()

    def select_card(self, position: Any) -> None:
        if self.phase is not Phase.ACTIVE:
            return
        if not isinstance(position, int) or isinstance(position, bool):
            return
        if not 0 <= position < len(self.deck):
            return
        if position in self.matched or position in self.selected:
            return

        self.selected.append(position)
        if len(self.selected) < 2:
            self._render()
            return

        self.moves += 1
        self.phase = Phase.RESOLVING
        first, second = self.selected
        if self.deck[first] == self.deck[second]:
            self._resolve_match(first, second)
        else:
            logger.debug(f"[mismatch] generation={self.generation} positions={first},{second}")
            self._render()
            task = self._scheduler.call_later(
                self.mismatch_delay, self._resolve_mismatch, self.generation, name='mismatch'
            )
            self._pending_tasks.append(task)

    def check_for_win(self) -> bool:
        # Only the transition out of ACTIVE counts; WON is terminal
        if self.phase is not Phase.ACTIVE:
            return False
        if not self.deck or len(self.matched) != len(self.deck):
            return False

        self._stop_clock()
        self.phase = Phase.WON
        summary = ScoreSummary.from_round(
            self.player_name, self.moves, self.elapsed_ms(), len(self.matched)
        )
        logger.info(
            f"[win] player={summary.player_name} moves={summary.move_count} seconds={summary.elapsed_seconds}"
        )
        self._render()
        self._emit('round_won', {
            'player_name': summary.player_name,
            'moves': summary.move_count,
            'matches': summary.match_count,
            'elapsed_seconds': summary.elapsed_seconds,
            'message': (
                f"Player: {summary.player_name} Moves: {summary.move_count} "
                f"Time: {format_elapsed(summary.elapsed_seconds * 1000)}"
            ),
        })
        if self.reporter is not None:
            self._scheduler.spawn(self._submit_score, summary)
        return True

    def reset_round(self) -> None:
        self._clear_round()
        logger.info(f"[round-reset] generation={self.generation}")
        self._render()

    def request_hint(self) -> None:
        if self.oracle is None or self.hint_pending:
            return
        if self.phase not in (Phase.ACTIVE, Phase.RESOLVING):
            return
        self.hint_pending = True
        self._render()
        self._scheduler.spawn(self._fetch_hint, self.generation, self.hint_state())

    def refresh_scores(self) -> None:
        if self.reporter is None:
            self._emit('scores', {
                'status': 'disabled',
                'entries': [],
                'message': 'Configure the score store to see the leaderboard.',
            })
            return
        self._emit('scores', {'status': 'loading', 'entries': [], 'message': 'Loading scores...'})
        self._scheduler.spawn(self._fetch_scores)

    # ---- views ----

    def elapsed_ms(self) -> int:
        if self._clock_handle is None:
            return 0
        return self._clock.elapsed_ms(self._clock_handle)

    def controls(self) -> Dict[str, bool]:
        playing = self.phase in (Phase.ACTIVE, Phase.RESOLVING)
        can_start = self.phase in (Phase.IDLE, Phase.WON)
        return {
            'start': can_start,
            'reset': playing,
            'hint': playing and self.oracle is not None and not self.hint_pending,
            'player_name': can_start,
        }

    def hint_state(self) -> Dict[str, Any]:
        return {
            'deck': list(self.deck),
            'matchedIndices': sorted(self.matched),
            'flippedIndices': list(self.selected),
            'moves': self.moves,
        }

    def snapshot(self) -> Dict[str, Any]:
        elapsed = self.elapsed_ms()
        cards = []
        for position, face in enumerate(self.deck):
            matched = position in self.matched
            flipped = matched or position in self.selected
            cards.append({
                'position': position,
                'face': face if flipped else None,
                'flipped': flipped,
                'matched': matched,
            })
        return {
            'phase': self.phase.value,
            'generation': self.generation,
            'player_name': self.player_name,
            'moves': self.moves,
            'elapsed_ms': elapsed,
            'elapsed': format_elapsed(elapsed),
            'selected': list(self.selected),
            'matched': sorted(self.matched),
            'cards': cards,
            'controls': self.controls(),
        }

    # ---- internals ----

    def _render(self) -> None:
        self._emit('state_update', self.snapshot())

    def _clear_round(self) -> None:
        self._stop_clock()
        for task in self._pending_tasks:
            task.cancel()
        self._pending_tasks = []
        self.generation += 1
        self.phase = Phase.IDLE
        self.player_name = ''
        self.deck = ()
        self.selected = []
        self.matched = set()
        self.moves = 0
        self.hint_pending = False
        self._clock_handle = None
        self._ticks = None

    def _stop_clock(self) -> None:
        if self._clock_handle is not None:
            self._clock.stop(self._clock_handle)

    def _resolve_match(self, first: int, second: int) -> None:
        self.matched.update((first, second))
        self.selected = []
        self.phase = Phase.ACTIVE
        logger.debug(f"[match] generation={self.generation} positions={first},{second} matched={len(self.matched)}")
        if not self.check_for_win():
            self._render()

    def _resolve_mismatch(self, generation: int) -> None:
        if generation != self.generation or self.phase is not Phase.RESOLVING:
            logger.info(f"[timer-abort] mismatch expected_generation={generation} actual={self.generation}")
            return
        self.selected = []
        self.phase = Phase.ACTIVE
        self._render()

    def _schedule_tick(self) -> None:
        task = self._scheduler.call_later(self.tick_interval, self._on_tick, self.generation, name='tick')
        self._pending_tasks = [t for t in self._pending_tasks if t.pending]
        self._pending_tasks.append(task)

    def _on_tick(self, generation: int) -> None:
        if generation != self.generation or self._ticks is None:
            return
        tick = next(self._ticks, None)
        if tick is None:
            return
        self._emit('timer', {'elapsed_ms': tick.elapsed_ms, 'elapsed': tick.display})
        self._schedule_tick()

    def _submit_score(self, summary: ScoreSummary) -> None:
        try:
            self.reporter.submit(summary)
        except NetworkError as exc:
            logger.warning(f"[score-submit] failed: {exc}")
            self._emit('notice', {'kind': 'error', 'message': 'Saving your score failed. Please try again later.'})
            return
        self.refresh_scores()

    def _fetch_scores(self) -> None:
        try:
            entries = self.reporter.fetch_recent(self.leaderboard_limit)
        except NetworkError as exc:
            logger.warning(f"[scores] fetch failed: {exc}")
            self._emit('scores', {'status': 'failed', 'entries': [], 'message': 'Could not load scores.'})
            return
        if not entries:
            self._emit('scores', {
                'status': 'empty',
                'entries': [],
                'message': 'No scores yet. Be the first to win!',
            })
            return
        self._emit('scores', {'status': 'ok', 'entries': [e.to_dict() for e in entries], 'message': ''})

    def _fetch_hint(self, generation: int, state: Dict[str, Any]) -> None:
        try:
            text = self.oracle.request_hint(state)
        except NetworkError as exc:
            logger.warning(f"[hint] request failed: {exc}")
            if generation == self.generation:
                self._emit('notice', {'kind': 'error', 'message': 'Something went wrong while fetching a hint.'})
            return
        finally:
            # Any outcome re-enables the hint control for the round that asked
            if generation == self.generation:
                self.hint_pending = False
                self._render()
        if generation != self.generation:
            logger.info(f"[hint] dropped stale hint expected_generation={generation} actual={self.generation}")
            return
        self._emit('hint', {'hint': text})
