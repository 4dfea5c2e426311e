from concurrent.futures import Future

from playplatform import socketio
from playplatform.models import Gameplay
from playplatform.platformer import GameLoop, ScoreReporter
from playplatform.platformer.events import StartOrRestart
from playplatform.platformer.state import GameState, Phase
from playplatform.services.scores import player_token


class FlaskSocketChannel:
    """Channel over the Flask-SocketIO test client; acks resolve immediately."""

    def __init__(self, sio_client, namespace='/ws'):
        self.sio_client = sio_client
        self.namespace = namespace
        self.sent = []

    def send(self, topic, event, payload):
        self.sent.append((topic, event, payload))
        future = Future()
        reply = self.sio_client.emit(event, {'topic': topic, 'payload': payload}, namespace=self.namespace, callback=True)
        future.set_result(reply)
        return future


def _names(sio_client):
    return [pkt['name'] for pkt in sio_client.get_received('/ws')]


def test_socket_connect_and_join(sio_client):
    assert sio_client.is_connected('/ws')
    assert 'connected' in _names(sio_client)

    ack = sio_client.emit('join', {'topic': 'score:platformer'}, namespace='/ws', callback=True)
    assert ack['status'] == 'ok'
    assert ack['response']['player_id'] is None
    assert 'joined' in _names(sio_client)


def test_join_rejects_bad_topic(sio_client):
    ack = sio_client.emit('join', {'topic': 'lobby'}, namespace='/ws', callback=True)
    assert ack == {'status': 'error', 'response': {'reason': 'invalid topic'}}
    assert 'error' in _names(sio_client)


def test_save_score_requires_join(sio_client, platformer):
    ack = sio_client.emit('save_score', {'topic': 'score:platformer', 'payload': {'player_score': 5}},
                          namespace='/ws', callback=True)
    assert ack['status'] == 'error'
    assert ack['response']['reason'] == 'unmatched topic'


def test_anonymous_save_score_is_acknowledged_not_stored(sio_client, platformer):
    sio_client.emit('join', {'topic': 'score:platformer'}, namespace='/ws', callback=True)
    sio_client.get_received('/ws')

    ack = sio_client.emit('save_score', {'topic': 'score:platformer', 'payload': {'player_score': 35}},
                          namespace='/ws', callback=True)
    assert ack == {'status': 'ok', 'response': {'player_score': 35, 'gameplay_id': None}}
    assert Gameplay.query.count() == 0

    broadcasts = [pkt for pkt in sio_client.get_received('/ws') if pkt['name'] == 'save_score']
    assert broadcasts and broadcasts[0]['args'][0] == {'player_score': 35}


def test_save_score_with_token_persists_gameplay(flask_app, platformer, player):
    token = player_token(player)
    sio = socketio.test_client(flask_app, namespace='/ws')
    ack = sio.emit('join', {'topic': 'score:platformer', 'token': token}, namespace='/ws', callback=True)
    assert ack['response']['player_id'] == player.id

    ack = sio.emit('save_score', {'topic': 'score:platformer', 'payload': {'player_score': 45}},
                   namespace='/ws', callback=True)
    assert ack['status'] == 'ok'
    gameplay = Gameplay.query.one()
    assert ack['response']['gameplay_id'] == gameplay.id
    assert (gameplay.player_id, gameplay.game_id, gameplay.player_score) == (player.id, platformer.id, 45)
    sio.disconnect(namespace='/ws')


def test_bad_token_leaves_socket_anonymous(sio_client, platformer):
    ack = sio_client.emit('join', {'topic': 'score:platformer', 'token': 'forged'}, namespace='/ws', callback=True)
    assert ack['status'] == 'ok'
    assert ack['response']['player_id'] is None


def test_save_score_validation(sio_client, platformer):
    sio_client.emit('join', {'topic': 'score:platformer'}, namespace='/ws', callback=True)
    for payload, reason in [
        ({}, 'player_score is required'),
        ({'player_score': 'lots'}, 'player_score must be an integer'),
        ({'player_score': -5}, 'player_score must be greater than or equal to 0'),
    ]:
        ack = sio_client.emit('save_score', {'topic': 'score:platformer', 'payload': payload},
                              namespace='/ws', callback=True)
        assert ack == {'status': 'error', 'response': {'reason': reason}}


def test_save_score_unknown_game(sio_client):
    sio_client.emit('join', {'topic': 'score:tetris'}, namespace='/ws', callback=True)
    ack = sio_client.emit('save_score', {'topic': 'score:tetris', 'payload': {'player_score': 10}},
                          namespace='/ws', callback=True)
    assert ack['status'] == 'error'
    assert 'tetris' in ack['response']['reason']


def test_leave_and_ping(sio_client):
    sio_client.emit('join', {'topic': 'score:platformer'}, namespace='/ws', callback=True)
    ack = sio_client.emit('leave', {'topic': 'score:platformer'}, namespace='/ws', callback=True)
    assert ack['status'] == 'ok'
    ack = sio_client.emit('leave', {'topic': 'score:platformer'}, namespace='/ws', callback=True)
    assert ack['status'] == 'error'

    sio_client.get_received('/ws')
    sio_client.emit('ping', {'n': 1}, namespace='/ws')
    pongs = [pkt for pkt in sio_client.get_received('/ws') if pkt['name'] == 'pong']
    assert pongs[0]['args'][0] == {'n': 1}


def test_game_loop_reports_score_over_socket(flask_app, platformer, player):
    sio = socketio.test_client(flask_app, namespace='/ws')
    sio.emit('join', {'topic': 'score:platformer', 'token': player_token(player)}, namespace='/ws', callback=True)
    channel = FlaskSocketChannel(sio)

    loop = GameLoop(reporter=ScoreReporter(channel), state=GameState(phase=Phase.GAME_OVER, score=35))
    loop.request_score_save()
    # the test client acks synchronously, so the ack lands in the same batch
    assert loop.run_pending() == 2

    assert channel.sent == [('score:platformer', 'save_score', {'player_score': 35})]
    assert Gameplay.query.one().player_score == 35
    assert loop.state == GameState(phase=Phase.GAME_OVER, score=35)

    loop.dispatch(StartOrRestart())
    loop.run_pending()
    assert loop.state.phase is Phase.PLAYING
    sio.disconnect(namespace='/ws')
