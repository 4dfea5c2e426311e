import pytest

from playplatform.platformer.render import project
from playplatform.platformer.state import Facing, GameState, Phase


def texts(scene):
    return [layer['text'] for layer in scene['layers'] if layer['kind'] == 'text']


def test_background_and_sprites():
    scene = project(GameState(character_x=80, item_x=200))
    assert (scene['width'], scene['height']) == (600, 400)
    sky, ground, character, item = scene['layers'][:4]
    assert (sky['y'], sky['height']) == (0, 300)
    assert (ground['y'], ground['height']) == (300, 100)
    assert (character['x'], item['x']) == (80, 200)
    assert character['y'] + character['height'] == 300


@pytest.mark.parametrize('facing,image', [
    (Facing.LEFT, '/images/character-left.gif'),
    (Facing.RIGHT, '/images/character-right.gif'),
    (Facing.EATING, '/images/character-eating.gif'),
])
def test_character_sprite_follows_facing(facing, image):
    assert project(GameState(facing=facing))['layers'][2]['href'] == image


def test_phase_overlays():
    assert any('start' in t for t in texts(project(GameState())))

    playing = texts(project(GameState(phase=Phase.PLAYING, score=15, items_collected=3, time_remaining=4)))
    assert playing == ['Score: 15', 'Coins: 3 / 10', 'Time: 4']

    success = texts(project(GameState(phase=Phase.SUCCESS, score=50)))
    assert success[0] == 'Success!' and 'Final score: 50' in success

    over = texts(project(GameState(phase=Phase.GAME_OVER, score=20)))
    assert over[0] == 'Game Over' and 'Final score: 20' in over


def test_projection_is_pure():
    state = GameState(phase=Phase.PLAYING)
    assert project(state) == project(state)
    assert state == GameState(phase=Phase.PLAYING)
