from flask import current_app, request

from pickup import relay, socketio
from pickup.events import game_updated


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _namespace() -> str:
    return request.namespace  # type: ignore


def _room_from(data):
    """Accept either a bare room name or ``{'room': name}``."""
    if isinstance(data, dict):
        return data.get('room')
    return data


def handle_connect(auth=None):
    relay.connect(_get_sid())
    current_app.logger.info(f"[socket] connected sid={_get_sid()}")


def handle_disconnect(reason=None):
    relay.disconnect(_get_sid(), namespace=_namespace())


def handle_join_room(data):
    relay.join(_get_sid(), _room_from(data), namespace=_namespace())


def handle_leave_room(data):
    relay.leave(_get_sid(), _room_from(data), namespace=_namespace())


def handle_chat_message(data):
    if not isinstance(data, dict):
        current_app.logger.debug(f"[socket] ignored malformed chat_message sid={_get_sid()}")
        return
    relay.send(
        _get_sid(),
        data.get('room'),
        data.get('author'),
        data.get('text'),
        namespace=_namespace(),
    )


def handle_error(exc):
    # Keep the connection open; only the offending event is dropped
    current_app.logger.exception(f"[socket] event failed sid={_get_sid()}: {exc}")


def forward_game_update(sender, game=None, **extra):
    """Broadcast an updated game to every connected client."""
    namespace = sender.config.get('SOCKETIO_NAMESPACE', '/')
    try:
        socketio.emit('update_game', game, namespace=namespace)
    except Exception:
        sender.logger.exception(f"[socket] update_game broadcast failed game={(game or {}).get('id')}")


def register_socketio_handlers(flask_app) -> None:
    """Register Socket.IO event handlers and domain event forwarding.

    Handlers live on the namespace named by SOCKETIO_NAMESPACE ('/' unless
    configured otherwise).
    """
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('join_room', handle_join_room, namespace=namespace)
    socketio.on_event('leave_room', handle_leave_room, namespace=namespace)
    socketio.on_event('chat_message', handle_chat_message, namespace=namespace)
    socketio.on_error(namespace)(handle_error)

    game_updated.connect(forward_game_update, sender=flask_app)
