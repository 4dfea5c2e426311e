"""Send a finished round's score to the server and turn the reply into an event."""
import logging
import threading
from concurrent.futures import CancelledError, Future, InvalidStateError, TimeoutError as FutureTimeout
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Protocol, Union

import socketio

from .events import ScoreSaveAck, ScoreSaveError

log = logging.getLogger(__name__)

SCORE_TOPIC = 'score:platformer'
SAVE_SCORE_EVENT = 'save_score'


class Channel(Protocol):
    def send(self, topic: str, event: str, payload: Mapping[str, Any]) -> Future: ...


@dataclass(frozen=True)
class Acknowledged:
    reply: Any = None


@dataclass(frozen=True)
class Failed:
    reason: Any = None


Outcome = Union[Acknowledged, Failed]


class SocketIOChannel:
    """Channel over a connected python-socketio ``Client``.

    Topics ride inside the event data; the server acknowledgement resolves
    the future returned by ``send``. Connecting and reconnecting the client
    is left to its owner.
    """

    def __init__(self, client: socketio.Client, namespace: str = '/ws'):
        self.client = client
        self.namespace = namespace

    def join(self, topic: str, token: Optional[str] = None, timeout: float = 5) -> Any:
        data = {'topic': topic}
        if token:
            data['token'] = token
        return self.client.call('join', data, namespace=self.namespace, timeout=timeout)

    def send(self, topic: str, event: str, payload: Mapping[str, Any]) -> Future:
        future: Future = Future()

        def _ack(*reply):
            try:
                future.set_result(reply[0] if reply else None)
            except InvalidStateError:
                # already expired by ScoreReporter.submit
                return

        try:
            self.client.emit(
                event,
                {'topic': topic, 'payload': dict(payload)},
                namespace=self.namespace,
                callback=_ack,
            )
        except socketio.exceptions.SocketIOError as exc:
            future.set_exception(exc)
        return future


def outcome_of(reply: Any) -> Outcome:
    """Map a server reply onto Acknowledged/Failed."""
    if isinstance(reply, Mapping) and reply.get('status') == 'ok':
        return Acknowledged(reply)
    if isinstance(reply, Mapping):
        response = reply.get('response')
        if isinstance(response, Mapping) and 'reason' in response:
            return Failed(response['reason'])
    return Failed(reply)


class ScoreReporter:
    def __init__(self, channel: Channel, topic: str = SCORE_TOPIC, event: str = SAVE_SCORE_EVENT,
                 timeout: Optional[float] = None):
        self.channel = channel
        self.topic = topic
        self.event = event
        self.timeout = timeout

    def _send(self, score: int) -> Future:
        log.info('Reporting score %d on %s', score, self.topic)
        return self.channel.send(self.topic, self.event, {'player_score': int(score)})

    def report(self, score: int, timeout: Optional[float] = None) -> Outcome:
        """Send the score once and wait for the single reply."""
        return self._resolve(self._send(score), timeout)

    def submit(self, score: int, deliver: Callable[[Any], None], timeout: Optional[float] = None) -> Future:
        """Send the score once without waiting.

        ``deliver`` later receives ScoreSaveAck or ScoreSaveError, possibly
        from the transport's or the timer's thread. With a timeout (or the
        reporter's default one) a reply that never comes is delivered as
        ScoreSaveError('timeout').
        """
        timeout = self.timeout if timeout is None else timeout
        future = self._send(score)
        if timeout is not None:
            timer = threading.Timer(timeout, _expire, args=(future,))
            timer.daemon = True
            timer.start()
            future.add_done_callback(lambda done: timer.cancel())
        future.add_done_callback(lambda done: deliver(_as_event(self._resolve(done, 0))))
        return future

    @staticmethod
    def _resolve(future: Future, timeout: Optional[float]) -> Outcome:
        try:
            reply = future.result(timeout)
        except FutureTimeout:
            log.warning('Score report got no reply in time')
            return Failed('timeout')
        except CancelledError:
            return Failed('cancelled')
        except Exception as exc:
            log.warning('Score report failed: %s', exc)
            return Failed(str(exc))
        outcome = outcome_of(reply)
        if isinstance(outcome, Failed):
            log.warning('Score report rejected: %s', outcome.reason)
        return outcome


def _expire(future: Future) -> None:
    if future.done():
        return
    try:
        future.set_exception(FutureTimeout())
    except InvalidStateError:
        # the reply landed between the check and the set
        return


def _as_event(outcome: Outcome):
    if isinstance(outcome, Acknowledged):
        return ScoreSaveAck(outcome.reply)
    return ScoreSaveError(outcome.reason)
