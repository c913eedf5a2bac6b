import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)


class ScheduledTask:
    """Handle for a delayed callback. Cancelling makes the callback a no-op."""

    def __init__(self, name: str, delay: float):
        self.name = name
        self.delay = delay
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)


class BackgroundScheduler:
    """Run delayed callbacks and fire-and-forget work as Socket.IO background tasks.

    - ``call_later`` sleeps cooperatively (``socketio.sleep``) then fires
      unless the task was cancelled in the meantime
    - ``spawn`` starts the callable right away in its own task
    """

    def __init__(self, socketio):
        self._socketio = socketio

    def call_later(self, delay: float, fn: Callable[..., Any], *args, name: str = 'task') -> ScheduledTask:
        task = ScheduledTask(name, delay)
        logger.info(f"[timer-set] task={name} delay={delay}s")
        self._socketio.start_background_task(self._worker, task, fn, args)
        return task

    def spawn(self, fn: Callable[..., Any], *args) -> None:
        self._socketio.start_background_task(fn, *args)

    def _worker(self, task: ScheduledTask, fn: Callable[..., Any], args: tuple) -> None:
        self._socketio.sleep(task.delay)
        if task.cancelled:
            logger.info(f"[timer-abort] task={task.name} cancelled")
            return
        task.fired = True
        logger.debug(f"[timer-fire] task={task.name}")
        fn(*args)
