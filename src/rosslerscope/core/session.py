"""
Live parameter editing with a debounced commit.

Edits update ``live`` at once; ``committed`` (what actually drives trajectory
generation) only follows after a quiet period, so a burst of key presses
regenerates the trajectory once. The debounce timer is polled from the frame
loop, there are no background threads.
"""

import logging
import time
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional

from rosslerscope.core.trajectory import DEFAULT_PARAMETERS, PARAM_NAMES, Parameters

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
CommitListener = Callable[[Parameters], None]

EVENT_KINDS = ("increment", "decrement", "reset", "restart")


@dataclass(frozen=True)
class ParamEvent:
    """Discrete event emitted by the parameter controls."""
    kind: str
    param: Optional[str] = None

    def __post_init__(self):
        if self.kind not in EVENT_KINDS:
            raise ValueError(f"Unknown event kind {self.kind!r}, expected one of {EVENT_KINDS}")
        if self.kind in ("increment", "decrement") and self.param not in PARAM_NAMES:
            raise ValueError(f"Unknown parameter {self.param!r}, expected one of {PARAM_NAMES}")


@dataclass
class SessionConfig:
    debounce_delay: float = 0.5   # seconds of quiet before committing
    step: float = 0.1
    decimals: int = 1
    defaults: Parameters = field(default_factory=lambda: DEFAULT_PARAMETERS)


class DebounceTimer:
    """
    Cancellable one-shot delayed callback, fired by polling.

    ``schedule`` replaces any pending callback. ``poll`` runs the callback on
    the first call at or after the deadline, then the timer is idle again, so
    each schedule fires at most once.
    """

    def __init__(self, delay: float, clock: Clock = time.monotonic):
        self.delay = delay
        self.clock = clock
        self._deadline: Optional[float] = None
        self._callback: Optional[Callable[[], None]] = None

    @property
    def pending(self) -> bool:
        return self._deadline is not None

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    def schedule(self, callback: Callable[[], None]):
        self._callback = callback
        self._deadline = self.clock() + self.delay

    def cancel(self):
        self._deadline = None
        self._callback = None

    def poll(self) -> bool:
        """Fire the pending callback if due. Returns True if it fired."""
        if self._deadline is None or self.clock() < self._deadline:
            return False
        callback = self._callback
        self.cancel()
        callback()
        return True


class ParameterSession:
    """
    Holds live and committed parameters.

    Commit listeners are called with the new committed Parameters whenever
    the debounce timer fires or ``reset`` is requested.
    """

    def __init__(
        self,
        config: Optional[SessionConfig] = None,
        clock: Clock = time.monotonic,
        initial: Optional[Parameters] = None,
    ):
        self.cfg = config or SessionConfig()
        self.live: Parameters = initial or self.cfg.defaults
        self.committed: Parameters = self.live
        self.timer = DebounceTimer(self.cfg.debounce_delay, clock)
        self._listeners: List[CommitListener] = []
        self._closed = False

    def add_listener(self, listener: CommitListener):
        self._listeners.append(listener)

    @property
    def dirty(self) -> bool:
        """True while an edit is waiting for its quiet period."""
        return self.timer.pending

    def _check_open(self):
        if self._closed:
            raise RuntimeError("ParameterSession has been torn down")

    def on_param_change(self, new_live: Parameters):
        """Record an edit and restart the quiet-period countdown."""
        self._check_open()
        self.live = new_live
        self.timer.cancel()
        self.timer.schedule(self._commit)

    def on_tick(self) -> bool:
        """Poll the debounce timer. Returns True if a commit happened."""
        if self._closed:
            return False
        return self.timer.poll()

    def _commit(self):
        self.committed = self.live
        logger.debug("Committed parameters %s", self.committed)
        for listener in self._listeners:
            listener(self.committed)

    def _stepped(self, name: str, direction: int) -> Parameters:
        if name not in PARAM_NAMES:
            raise ValueError(f"Unknown parameter {name!r}, expected one of {PARAM_NAMES}")
        value = getattr(self.live, name) + direction * self.cfg.step
        # Round every step so repeated edits never show 0.30000000000000004
        return replace(self.live, **{name: round(value, self.cfg.decimals)})

    def increment(self, name: str):
        self.on_param_change(self._stepped(name, +1))

    def decrement(self, name: str):
        self.on_param_change(self._stepped(name, -1))

    def reset(self):
        """Restore defaults immediately, skipping the quiet period."""
        self._check_open()
        self.timer.cancel()
        self.live = self.cfg.defaults
        self._commit()

    def handle(self, event: ParamEvent) -> bool:
        """
        Apply a control event.

        Returns:
            False for events this session does not own (``restart``).
        """
        if event.kind == "increment":
            self.increment(event.param)
        elif event.kind == "decrement":
            self.decrement(event.param)
        elif event.kind == "reset":
            self.reset()
        else:
            return False
        return True

    def teardown(self):
        """Cancel any pending commit; the session accepts no further edits."""
        self.timer.cancel()
        self._listeners.clear()
        self._closed = True
