from typing import Any, Dict, List

from .state import (
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    GROUND_Y,
    SPRITE_SIZE,
    WIN_THRESHOLD,
    Facing,
    GameState,
    Phase,
)

SKY_COLOR = '#4cc8f4'
GROUND_COLOR = '#ad9a74'
TEXT_COLOR = '#ffffff'

CHARACTER_IMAGES = {
    Facing.LEFT: '/images/character-left.gif',
    Facing.RIGHT: '/images/character-right.gif',
    Facing.EATING: '/images/character-eating.gif',
}
ITEM_IMAGE = '/images/coin.svg'


def _rect(x, y, width, height, fill) -> Dict[str, Any]:
    return {'kind': 'rect', 'x': x, 'y': y, 'width': width, 'height': height, 'fill': fill}


def _sprite(href, x, y) -> Dict[str, Any]:
    return {'kind': 'image', 'href': href, 'x': x, 'y': y, 'width': SPRITE_SIZE, 'height': SPRITE_SIZE}


def _text(content, x, y, size=16) -> Dict[str, Any]:
    return {'kind': 'text', 'text': content, 'x': x, 'y': y, 'size': size, 'fill': TEXT_COLOR}


def _overlay(state: GameState) -> List[Dict[str, Any]]:
    center = CANVAS_WIDTH // 2
    if state.phase is Phase.START_SCREEN:
        return [
            _text('Collect ten coins in ten seconds!', center, 160, size=24),
            _text('Press the SPACE BAR key to start.', center, 200),
        ]
    if state.phase is Phase.PLAYING:
        return [
            _text(f'Score: {state.score}', 25, 25),
            _text(f'Coins: {state.items_collected} / {WIN_THRESHOLD}', 25, 50),
            _text(f'Time: {state.time_remaining}', CANVAS_WIDTH - 100, 25),
        ]
    if state.phase is Phase.SUCCESS:
        return [
            _text('Success!', center, 140, size=32),
            _text(f'Final score: {state.score}', center, 180),
            _text('Press the SPACE BAR key to restart.', center, 210),
        ]
    return [
        _text('Game Over', center, 140, size=32),
        _text(f'Final score: {state.score}', center, 180),
        _text('Press the SPACE BAR key to restart.', center, 210),
    ]


def project(state: GameState) -> Dict[str, Any]:
    """Describe the scene for ``state`` as plain data, drawn back to front."""
    layers = [
        _rect(0, 0, CANVAS_WIDTH, GROUND_Y, SKY_COLOR),
        _rect(0, GROUND_Y, CANVAS_WIDTH, CANVAS_HEIGHT - GROUND_Y, GROUND_COLOR),
        _sprite(CHARACTER_IMAGES[state.facing], state.character_x, state.character_y),
        _sprite(ITEM_IMAGE, state.item_x, state.item_y),
    ]
    layers.extend(_overlay(state))
    return {
        'width': CANVAS_WIDTH,
        'height': CANVAS_HEIGHT,
        'phase': state.phase.value,
        'layers': layers,
    }
