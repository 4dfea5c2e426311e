from flask_socketio import join_room, leave_room, emit
from flask import current_app, request
from flask_login import current_user
from playplatform import socketio
from playplatform.services.scores import (
    ScoreError,
    game_slug_for_topic,
    save_score,
    verify_player_token,
)
from typing import Dict, Any


# Socket context keyed by request.sid: bound player and joined topics
_sid_to_ctx: Dict[str, Dict[str, Any]] = {}


def _get_sid() -> str:
    return request.sid  # type: ignore[attr-defined]


def _ctx() -> Dict[str, Any]:
    return _sid_to_ctx.setdefault(_get_sid(), {'player_id': None, 'topics': set()})


def _reply_ok(response: Dict[str, Any]) -> Dict[str, Any]:
    return {'status': 'ok', 'response': response}


def _reply_error(reason: str) -> Dict[str, Any]:
    return {'status': 'error', 'response': {'reason': reason}}


def handle_connect():
    _ctx()
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(*args):
    ctx = _sid_to_ctx.pop(_get_sid(), None)
    if ctx and ctx.get('topics'):
        current_app.logger.info(f"[disconnect] player={ctx.get('player_id')} topics={sorted(ctx['topics'])}")


def handle_join(data):
    """Subscribe the socket to a ``score:<slug>`` topic.

    A signed player token (or a logged-in session) binds the socket to a
    player so that saved scores are recorded as gameplays.
    """
    data = data or {}
    topic = data.get('topic')
    if game_slug_for_topic(topic) is None:
        emit('error', {'message': 'topic must look like score:<game>'})
        return _reply_error('invalid topic')

    ctx = _ctx()
    player_id = verify_player_token(data.get('token'))
    if player_id is None and current_user.is_authenticated:
        player_id = current_user.id
    if player_id is not None:
        ctx['player_id'] = player_id

    join_room(topic)
    ctx['topics'].add(topic)
    emit('joined', {'topic': topic, 'player_id': ctx['player_id']})
    return _reply_ok({'topic': topic, 'player_id': ctx['player_id']})


def handle_leave(data):
    topic = (data or {}).get('topic')
    ctx = _ctx()
    if topic not in ctx['topics']:
        emit('error', {'message': f'not joined to {topic}'})
        return _reply_error('unmatched topic')
    leave_room(topic)
    ctx['topics'].discard(topic)
    emit('left', {'topic': topic})
    return _reply_ok({'topic': topic})


def handle_save_score(data):
    """Persist a reported score; the return value is the client's acknowledgement."""
    data = data or {}
    topic = data.get('topic')
    payload = data.get('payload')
    ctx = _ctx()
    if topic not in ctx['topics']:
        return _reply_error('unmatched topic')
    if not isinstance(payload, dict) or 'player_score' not in payload:
        return _reply_error('player_score is required')

    player_score = payload['player_score']
    try:
        gameplay = save_score(game_slug_for_topic(topic), player_score, ctx.get('player_id'))
    except ScoreError as exc:
        current_app.logger.info(f"[save_score] rejected topic={topic} reason={exc.reason}")
        return _reply_error(exc.reason)

    emit('save_score', {'player_score': player_score}, to=topic)
    return _reply_ok({
        'player_score': player_score,
        'gameplay_id': gameplay.id if gameplay else None,
    })


def handle_ping(data=None):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        socketio.on_event('connect', handle_connect, namespace=namespace)
        socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
        socketio.on_event('join', handle_join, namespace=namespace)
        socketio.on_event('leave', handle_leave, namespace=namespace)
        socketio.on_event('save_score', handle_save_score, namespace=namespace)
        socketio.on_event('ping', handle_ping, namespace=namespace)
