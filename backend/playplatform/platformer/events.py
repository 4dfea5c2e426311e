"""Events consumed by the reducer and effects it asks the loop to run."""
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class MoveRight:
    pass


@dataclass(frozen=True)
class MoveLeft:
    pass


@dataclass(frozen=True)
class StartOrRestart:
    pass


@dataclass(frozen=True)
class Tick:
    """One rendered frame; ``delta`` is the seconds since the previous one."""
    delta: float = 0.0


@dataclass(frozen=True)
class CountdownTick:
    pass


@dataclass(frozen=True)
class ItemRelocated:
    x: int


@dataclass(frozen=True)
class RequestScoreSave:
    pass


@dataclass(frozen=True)
class ScoreSaveAck:
    reply: Any = None


@dataclass(frozen=True)
class ScoreSaveError:
    reason: Any = None


# Effects

@dataclass(frozen=True)
class PersistScore:
    score: int


@dataclass(frozen=True)
class RelocateItem:
    """Pick a new item x uniformly in [low, high] and feed back ItemRelocated."""
    low: int
    high: int
