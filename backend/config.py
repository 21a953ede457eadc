import os


def _origins(raw):
    return [o.strip() for o in raw.split(',') if o.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///pickup.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Frontends allowed to call the API and open sockets
    ALLOWED_ORIGINS = _origins(os.environ.get(
        'ALLOWED_ORIGINS',
        'http://localhost:5173,https://game1-frontend.vercel.app',
    ))
    # Applied when a game is created without an explicit maxPlayers
    DEFAULT_MAX_PLAYERS = int(os.environ.get('DEFAULT_MAX_PLAYERS', '6'))
    # Messages replayed to a client when it joins a chat room
    CHAT_HISTORY_LIMIT = int(os.environ.get('CHAT_HISTORY_LIMIT', '50'))
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
