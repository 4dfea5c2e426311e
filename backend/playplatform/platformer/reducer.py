from dataclasses import replace
from typing import Optional, Tuple, Union

from .events import (
    CountdownTick,
    ItemRelocated,
    MoveLeft,
    MoveRight,
    PersistScore,
    RelocateItem,
    RequestScoreSave,
    ScoreSaveAck,
    ScoreSaveError,
    StartOrRestart,
    Tick,
)
from .state import (
    ITEM_MAX_X,
    ITEM_MIN_X,
    REWARD,
    STEP,
    WIN_THRESHOLD,
    Facing,
    GameState,
    Phase,
)

Effect = Union[PersistScore, RelocateItem]


def reduce(state: GameState, event) -> Tuple[GameState, Optional[Effect]]:
    """Apply one event to the state.

    Returns the next state and at most one effect for the caller to run.
    Events that do not apply in the current phase return ``state`` itself.
    """
    playing = state.phase is Phase.PLAYING

    if isinstance(event, MoveRight):
        if not playing:
            return state, None
        return replace(state, character_x=state.character_x + STEP, facing=Facing.RIGHT), None

    if isinstance(event, MoveLeft):
        if not playing:
            return state, None
        return replace(state, character_x=state.character_x - STEP, facing=Facing.LEFT), None

    if isinstance(event, StartOrRestart):
        if playing:
            return state, None
        return state.new_round(), None

    if isinstance(event, Tick):
        if not playing:
            return state, None
        return _tick(state)

    if isinstance(event, CountdownTick):
        if not playing or state.time_remaining <= 0:
            return state, None
        return replace(state, time_remaining=state.time_remaining - 1), None

    if isinstance(event, ItemRelocated):
        return replace(state, item_x=event.x), None

    if isinstance(event, RequestScoreSave):
        return state, PersistScore(score=state.score)

    if isinstance(event, (ScoreSaveAck, ScoreSaveError)):
        return state, None

    raise TypeError(f'unknown event {event!r}')


def _tick(state: GameState) -> Tuple[GameState, Optional[Effect]]:
    if state.found_item:
        collected = replace(
            state,
            facing=Facing.EATING,
            score=state.score + REWARD,
            items_collected=state.items_collected + 1,
        )
        return collected, RelocateItem(low=ITEM_MIN_X, high=ITEM_MAX_X)
    if state.items_collected >= WIN_THRESHOLD:
        return replace(state, phase=Phase.SUCCESS), None
    if state.time_remaining == 0:
        return replace(state, phase=Phase.GAME_OVER), None
    return state, None
