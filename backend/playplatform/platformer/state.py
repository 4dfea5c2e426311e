from dataclasses import dataclass, replace
from enum import Enum


CANVAS_WIDTH = 600
CANVAS_HEIGHT = 400
GROUND_Y = 300
SPRITE_SIZE = 50

START_X = 50
START_ITEM_X = 150
GROUND_LEVEL = GROUND_Y - SPRITE_SIZE
STEP = 15
REWARD = 5
WIN_THRESHOLD = 10
ROUND_SECONDS = 10
# Character counts as on the item from this many pixels left of it up to its left edge
REACH = 35
ITEM_MIN_X = 75
ITEM_MAX_X = 450


class Phase(Enum):
    START_SCREEN = 'start_screen'
    PLAYING = 'playing'
    SUCCESS = 'success'
    GAME_OVER = 'game_over'


class Facing(Enum):
    LEFT = 'left'
    RIGHT = 'right'
    EATING = 'eating'


@dataclass(frozen=True)
class GameState:
    """Snapshot of one platformer round"""

    character_x: int = START_X
    character_y: int = GROUND_LEVEL
    facing: Facing = Facing.RIGHT
    item_x: int = START_ITEM_X
    item_y: int = GROUND_LEVEL
    items_collected: int = 0
    score: int = 0
    time_remaining: int = ROUND_SECONDS
    phase: Phase = Phase.START_SCREEN

    def new_round(self) -> 'GameState':
        """Reset the round-scoped fields and enter PLAYING; the item stays put."""
        return replace(
            self,
            phase=Phase.PLAYING,
            character_x=START_X,
            facing=Facing.RIGHT,
            items_collected=0,
            score=0,
            time_remaining=ROUND_SECONDS,
        )

    @property
    def found_item(self) -> bool:
        return self.item_x - REACH <= self.character_x <= self.item_x

    @property
    def finished(self) -> bool:
        return self.phase in (Phase.SUCCESS, Phase.GAME_OVER)
