from playplatform import db
from playplatform.models import Game, Gameplay, Player
from flask import current_app
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired
from typing import Any, Dict, List, Optional

TOPIC_PREFIX = 'score:'
_TOKEN_SALT = 'player socket'


class ScoreError(Exception):
    """A score could not be accepted; ``reason`` is sent back to the client."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


def game_slug_for_topic(topic) -> Optional[str]:
    """Return the game slug of a ``score:<slug>`` topic, or None."""
    if not isinstance(topic, str) or not topic.startswith(TOPIC_PREFIX):
        return None
    slug = topic[len(TOPIC_PREFIX):]
    return slug or None


def save_score(game_slug: str, player_score, player_id: Optional[int] = None) -> Optional[Gameplay]:
    """Validate a reported score and persist it as a gameplay.

    Anonymous scores (no ``player_id``) are validated but not stored; the
    return value is then None.
    """
    if isinstance(player_score, bool) or not isinstance(player_score, int):
        raise ScoreError('player_score must be an integer')
    if player_score < 0:
        raise ScoreError('player_score must be greater than or equal to 0')

    game = Game.query.filter_by(slug=game_slug).first()
    if game is None:
        raise ScoreError(f'unknown game {game_slug!r}')
    if player_id is None:
        return None

    player = db.session.get(Player, player_id)
    if player is None:
        raise ScoreError('unknown player')

    gameplay = Gameplay(game_id=game.id, player_id=player.id, player_score=player_score)
    try:
        db.session.add(gameplay)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    current_app.logger.info(
        f"[save_score] game={game.slug} player={player.id} score={player_score} gameplay={gameplay.id}"
    )
    return gameplay


def leaderboard(game: Game, limit: int) -> List[Dict[str, Any]]:
    """Top gameplays of a game, highest score first, earliest first on ties."""
    rows = (
        db.session.query(Gameplay, Player)
        .join(Player, Gameplay.player_id == Player.id)
        .filter(Gameplay.game_id == game.id)
        .order_by(Gameplay.player_score.desc(), Gameplay.inserted_at.asc(), Gameplay.id.asc())
        .limit(limit)
        .all()
    )
    board = []
    for rank, (gameplay, player) in enumerate(rows, start=1):
        board.append({
            'rank': rank,
            'player_id': player.id,
            'username': player.username,
            'display_name': player.display_name,
            'player_score': gameplay.player_score,
        })
    return board


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(current_app.config['SECRET_KEY'], salt=_TOKEN_SALT)


def player_token(player: Player) -> str:
    """Signed token a client presents when joining a score topic."""
    return _serializer().dumps(player.id)


def verify_player_token(token) -> Optional[int]:
    if not token or not isinstance(token, str):
        return None
    max_age = int(current_app.config.get('PLAYER_TOKEN_MAX_AGE_SEC', 86400))
    try:
        player_id = _serializer().loads(token, max_age=max_age)
    except SignatureExpired:
        current_app.logger.info('[player_token] expired token rejected')
        return None
    except BadSignature:
        current_app.logger.info('[player_token] invalid token rejected')
        return None
    return player_id if isinstance(player_id, int) else None
