from playplatform import db, bcrypt
from flask_login import UserMixin
from datetime import datetime, timezone
from typing import Any, Dict, List
import re


def _now():
    return datetime.now(timezone.utc)


def _add_error(errors: Dict[str, List[str]], field: str, message: str) -> None:
    errors.setdefault(field, []).append(message)


def _validate_length(errors, field, value, minimum, maximum):
    if value is None:
        return
    if len(value) < minimum:
        _add_error(errors, field, f'should be at least {minimum} character(s)')
    elif len(value) > maximum:
        _add_error(errors, field, f'should be at most {maximum} character(s)')


def _cast_int(errors, field, value):
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        _add_error(errors, field, 'is invalid')
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        _add_error(errors, field, 'is invalid')
        return None


def slugify(text: str) -> str:
    return re.sub(r'[^a-z0-9]+', '-', (text or '').lower()).strip('-')


class Gameplay(db.Model):
    __tablename__ = 'gameplay'
    id = db.Column(db.Integer, primary_key=True)
    game_id = db.Column(db.Integer, db.ForeignKey('game.id'), nullable=False, index=True)
    player_id = db.Column(db.Integer, db.ForeignKey('player.id'), nullable=False, index=True)
    player_score = db.Column(db.Integer, default=0, nullable=False)
    inserted_at = db.Column(db.DateTime(timezone=True), default=_now, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=_now, onupdate=_now, nullable=False)

    game = db.relationship('Game', back_populates='gameplays')
    player = db.relationship('Player', back_populates='gameplays')

    @staticmethod
    def validate(attrs: Dict[str, Any]) -> Dict[str, List[str]]:
        """Check a gameplay payload; returns field errors (empty when valid)."""
        errors: Dict[str, List[str]] = {}
        for field in ('game_id', 'player_id', 'player_score'):
            if attrs.get(field) is None:
                _add_error(errors, field, "can't be blank")
        if errors:
            return errors
        score = _cast_int(errors, 'player_score', attrs['player_score'])
        if score is not None and score < 0:
            _add_error(errors, 'player_score', 'must be greater than or equal to 0')
        game_id = _cast_int(errors, 'game_id', attrs['game_id'])
        if game_id is not None and db.session.get(Game, game_id) is None:
            _add_error(errors, 'game_id', 'does not exist')
        player_id = _cast_int(errors, 'player_id', attrs['player_id'])
        if player_id is not None and db.session.get(Player, player_id) is None:
            _add_error(errors, 'player_id', 'does not exist')
        return errors

    def to_dict(self):
        return {
            'id': self.id,
            'game_id': self.game_id,
            'player_id': self.player_id,
            'player_score': self.player_score,
            'inserted_at': self.inserted_at.isoformat() if self.inserted_at else None,
        }


class Player(UserMixin, db.Model):
    __tablename__ = 'player'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(100), unique=True, nullable=False, index=True)
    display_name = db.Column(db.String(100), nullable=True)
    password_digest = db.Column(db.String(256), nullable=True)
    score = db.Column(db.Integer, default=0, nullable=False)
    inserted_at = db.Column(db.DateTime(timezone=True), default=_now, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=_now, onupdate=_now, nullable=False)

    gameplays = db.relationship('Gameplay', back_populates='player', cascade='all, delete-orphan')
    games = db.relationship('Game', secondary='gameplay', viewonly=True)

    def set_password(self, password):
        self.password_digest = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        if not self.password_digest or not isinstance(password, str) or not password:
            return False
        return bcrypt.check_password_hash(self.password_digest, password)

    def apply_changes(self, attrs: Dict[str, Any], registration: bool = False) -> Dict[str, List[str]]:
        """Validate ``attrs`` and copy the permitted fields onto this player.

        Registration requires both a username and a password; a plain update
        only requires that the player ends up with a username. The password
        is never stored, only its bcrypt digest. Nothing is copied when any
        field is invalid.
        """
        attrs = attrs or {}
        permitted = ('username', 'password', 'display_name')
        if not registration:
            permitted += ('score',)
        changes = {key: attrs[key] for key in permitted if key in attrs}
        errors: Dict[str, List[str]] = {}

        username = changes.get('username', self.username)
        if isinstance(username, str):
            username = username.strip()
        if not username:
            _add_error(errors, 'username', "can't be blank")
        elif not isinstance(username, str):
            _add_error(errors, 'username', 'is invalid')
        else:
            _validate_length(errors, 'username', username, 2, 100)
            taken = Player.query.filter(Player.username == username)
            if self.id is not None:
                taken = taken.filter(Player.id != self.id)
            if taken.first() is not None:
                _add_error(errors, 'username', 'has already been taken')

        password = changes.get('password')
        if registration and not password:
            _add_error(errors, 'password', "can't be blank")
        elif password is not None:
            if not isinstance(password, str):
                _add_error(errors, 'password', 'is invalid')
            else:
                _validate_length(errors, 'password', password, 6, 100)

        display_name = changes.get('display_name')
        if display_name is not None and not isinstance(display_name, str):
            _add_error(errors, 'display_name', 'is invalid')

        score = None
        if 'score' in changes:
            score = _cast_int(errors, 'score', changes['score'])
            if score is not None and score < 0:
                _add_error(errors, 'score', 'must be greater than or equal to 0')

        if errors:
            return errors

        self.username = username
        if 'display_name' in changes:
            self.display_name = display_name
        if score is not None:
            self.score = score
        if password:
            self.set_password(password)
        return errors

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'display_name': self.display_name,
            'score': self.score,
        }


class Game(db.Model):
    __tablename__ = 'game'
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    thumbnail = db.Column(db.String(255), nullable=True)
    featured = db.Column(db.Boolean, default=False, nullable=False)
    inserted_at = db.Column(db.DateTime(timezone=True), default=_now, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=_now, onupdate=_now, nullable=False)

    gameplays = db.relationship('Gameplay', back_populates='game', cascade='all, delete-orphan')
    players = db.relationship('Player', secondary='gameplay', viewonly=True)

    def apply_changes(self, attrs: Dict[str, Any]) -> Dict[str, List[str]]:
        """Validate ``attrs`` and copy title/slug/description/thumbnail/featured."""
        attrs = attrs or {}
        errors: Dict[str, List[str]] = {}

        title = attrs.get('title', self.title)
        if not title or not isinstance(title, str):
            _add_error(errors, 'title', "can't be blank")

        slug = attrs.get('slug') or self.slug or (slugify(title) if isinstance(title, str) else None)
        if isinstance(slug, str):
            slug = slugify(slug)
        if not slug:
            _add_error(errors, 'slug', "can't be blank")
        else:
            taken = Game.query.filter(Game.slug == slug)
            if self.id is not None:
                taken = taken.filter(Game.id != self.id)
            if taken.first() is not None:
                _add_error(errors, 'slug', 'has already been taken')

        featured = attrs.get('featured', self.featured)
        if featured is not None and not isinstance(featured, bool):
            _add_error(errors, 'featured', 'is invalid')

        if errors:
            return errors

        self.title = title
        self.slug = slug
        self.featured = bool(featured)
        for field in ('description', 'thumbnail'):
            if field in attrs:
                setattr(self, field, attrs[field])
        return errors

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'slug': self.slug,
            'description': self.description,
            'thumbnail': self.thumbnail,
            'featured': self.featured,
        }
