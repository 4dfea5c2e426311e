"""Single-threaded driver: merges input, frame and countdown events into one queue."""
import logging
import queue
import random
import time
from typing import Callable, Iterable, Optional

from .events import (
    CountdownTick,
    ItemRelocated,
    MoveLeft,
    MoveRight,
    PersistScore,
    RelocateItem,
    RequestScoreSave,
    ScoreSaveError,
    StartOrRestart,
    Tick,
)
from .reducer import reduce
from .render import project
from .state import GameState

log = logging.getLogger(__name__)

KEY_LEFT = 37
KEY_RIGHT = 39
KEY_SPACE = 32

KEY_EVENTS = {
    KEY_RIGHT: MoveRight,
    KEY_LEFT: MoveLeft,
    KEY_SPACE: StartOrRestart,
}


class GameLoop:
    """Owns the current GameState and reduces queued events one at a time."""

    def __init__(self, reporter=None, rng: Optional[random.Random] = None,
                 state: Optional[GameState] = None,
                 on_render: Optional[Callable[[dict], None]] = None):
        self.reporter = reporter
        self.rng = rng or random.Random()
        self.state = state or GameState()
        self.on_render = on_render
        self.scene = project(self.state)
        self._events: queue.Queue = queue.Queue()

    # Event sources

    def key_down(self, code: int) -> bool:
        event_type = KEY_EVENTS.get(code)
        if event_type is None:
            return False
        self.dispatch(event_type())
        return True

    def frame(self, delta: float) -> None:
        self.dispatch(Tick(delta))

    def countdown(self) -> None:
        self.dispatch(CountdownTick())

    def request_score_save(self) -> None:
        self.dispatch(RequestScoreSave())

    def dispatch(self, event) -> None:
        # Called from the reporter's transport thread as well as the loop
        self._events.put(event)

    # Reduction

    def step(self, event) -> None:
        before = self.state.phase
        self.state, effect = reduce(self.state, event)
        if self.state.phase is not before:
            log.info('Phase %s -> %s (score=%d)', before.value, self.state.phase.value, self.state.score)
            if self.state.finished:
                log.info('Round over: %d item(s), score %d', self.state.items_collected, self.state.score)
        if isinstance(event, ScoreSaveError):
            log.warning('Score was not saved: %s', event.reason)
        if effect is not None:
            self._run_effect(effect)

    def _run_effect(self, effect) -> None:
        if isinstance(effect, RelocateItem):
            # Applied before any later queued event so the old spot cannot be collected twice
            self.step(ItemRelocated(self.rng.randint(effect.low, effect.high)))
        elif isinstance(effect, PersistScore):
            if self.reporter is None:
                log.warning('No score reporter configured; dropping score %d', effect.score)
                return
            self.reporter.submit(effect.score, self.dispatch)

    def run_pending(self) -> int:
        """Reduce every queued event, then render once. Returns the count."""
        processed = 0
        while True:
            try:
                event = self._events.get_nowait()
            except queue.Empty:
                break
            self.step(event)
            processed += 1
        if processed:
            self.scene = project(self.state)
            if self.on_render is not None:
                self.on_render(self.scene)
        return processed

    def run(self, poll_keys: Callable[[], Iterable[int]], should_stop: Callable[[], bool],
            clock: Callable[[], float] = time.monotonic,
            sleep: Callable[[float], None] = time.sleep,
            fps: int = 60) -> None:
        """Plain frame loop: keys, one Tick per frame, one CountdownTick per second."""
        frame_interval = 1.0 / fps
        last = clock()
        second_mark = last
        while not should_stop():
            for code in poll_keys():
                self.key_down(code)
            now = clock()
            self.frame(now - last)
            last = now
            while now - second_mark >= 1.0:
                second_mark += 1.0
                self.countdown()
            self.run_pending()
            remaining = frame_interval - (clock() - now)
            if remaining > 0:
                sleep(remaining)
