"""Platformer game client: pure reducer, score reporter and frame loop.

The reducer never touches the network or randomness; the loop driver runs
the effects it requests and feeds the results back in as events.
"""
from .state import GameState, Phase, Facing
from .reducer import reduce
from .reporter import ScoreReporter, SocketIOChannel, Acknowledged, Failed
from .loop import GameLoop
from .render import project

__all__ = [
    'GameState', 'Phase', 'Facing', 'reduce',
    'ScoreReporter', 'SocketIOChannel', 'Acknowledged', 'Failed',
    'GameLoop', 'project',
]
