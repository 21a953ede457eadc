from datetime import datetime, timezone

from flask import current_app

from pickup import db


def utcnow():
    return datetime.now(timezone.utc)


def optional_str(value):
    return None if value is None else str(value)


def _isoformat(value):
    if value is None:
        return None
    # SQLite hands naive datetimes back; every stored timestamp is UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


class Game(db.Model):
    __tablename__ = 'game'
    __table_args__ = (
        db.CheckConstraint('players >= 0', name='ck_game_players_non_negative'),
        db.CheckConstraint('players <= max_players', name='ck_game_players_within_max'),
    )
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200))
    sport = db.Column(db.String(64))
    time = db.Column(db.String(64))  # as entered by the organiser
    location = db.Column(db.String(200))
    players = db.Column(db.Integer, nullable=False)
    max_players = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    def __init__(self, **kwargs):
        super(Game, self).__init__(**kwargs)
        if self.players is None:
            self.players = 0
        if self.max_players is None:
            self.max_players = current_app.config.get('DEFAULT_MAX_PLAYERS', 6)
        if self.created_at is None:
            self.created_at = utcnow()

    @property
    def is_full(self):
        return self.players >= self.max_players

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'sport': self.sport,
            'time': self.time,
            'location': self.location,
            'players': self.players,
            'maxPlayers': self.max_players,
            'createdAt': _isoformat(self.created_at),
        }


class Post(db.Model):
    __tablename__ = 'post'
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200))
    caption = db.Column(db.Text)
    image = db.Column(db.Text)
    author_id = db.Column(db.String(64))
    author_name = db.Column(db.String(128))
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'caption': self.caption,
            'image': self.image,
            'author': {'id': self.author_id, 'name': self.author_name},
            'createdAt': _isoformat(self.created_at),
        }


class ChatMessage(db.Model):
    __tablename__ = 'chat_message'
    __table_args__ = (
        db.CheckConstraint("room <> ''", name='ck_chat_message_room_not_empty'),
        db.Index('ix_chat_message_room_created', 'room', 'created_at', 'id'),
    )
    id = db.Column(db.Integer, primary_key=True)
    room = db.Column(db.String(128), nullable=False)
    author_id = db.Column(db.String(64))
    author_name = db.Column(db.String(128))
    text = db.Column(db.Text, nullable=False, default='')
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'room': self.room,
            'author': {'id': self.author_id, 'name': self.author_name},
            'text': self.text,
            'createdAt': _isoformat(self.created_at),
        }
