import threading
from typing import Dict, List, Optional, Set, Tuple

from flask import current_app
from flask_socketio import join_room, leave_room

from pickup.exceptions import StoreUnavailable
from pickup.services.chat import messages as chat_store

# Rooms are mapped onto a fixed pool of locks, so client-chosen room names
# never grow process state.
ROOM_LOCK_STRIPES = 64


class RoomRelay:
    """Process-wide registry of chat room membership and message fan-out.

    Lifecycle: created at import like the other extensions, bound to the
    app by ``init_app``; a client is registered on connect, gains and loses
    rooms through ``join``/``leave`` and is dropped on ``disconnect``.
    ``shutdown`` clears everything when the server stops.

    Locking:
    - ``_lock`` guards the membership tables.
    - each room maps to one lock of a fixed stripe pool, held across
      history snapshot + subscribe and across persist + broadcast. Every
      member of a room therefore sees messages in one order, and a joining
      client gets each message either in its history or live, never both
      and never neither. Rooms sharing a stripe are merely serialized
      together.
    """

    def __init__(self, app=None, socketio=None):
        self._socketio = None
        self._lock = threading.Lock()
        self._connected: Set[str] = set()
        self._memberships: Dict[str, Set[str]] = {}
        self._room_locks: Tuple[threading.Lock, ...] = tuple(
            threading.Lock() for _ in range(ROOM_LOCK_STRIPES)
        )
        if app is not None:
            self.init_app(app, socketio)

    def init_app(self, app, socketio) -> None:
        self._socketio = socketio
        app.extensions['room_relay'] = self

    # ---- membership ----

    def connect(self, sid: str) -> None:
        with self._lock:
            self._connected.add(sid)
            self._memberships.setdefault(sid, set())

    def join(self, sid: str, room, namespace: str = '/') -> Optional[List[dict]]:
        """Subscribe ``sid`` to ``room`` and send it the recent history.

        Returns the history that was sent, or None when the request was
        ignored. If the history cannot be loaded the join is undone.
        """
        if not _valid_room(room):
            current_app.logger.debug(f"[relay] ignored join sid={sid} room={room!r}")
            return None

        with self._room_lock(room):
            with self._lock:
                if sid not in self._connected:
                    return None
                newly_joined = room not in self._memberships[sid]
                self._memberships[sid].add(room)
            join_room(room, sid=sid, namespace=namespace)

            limit = int(current_app.config.get('CHAT_HISTORY_LIMIT', 50))
            try:
                history = [m.to_dict() for m in chat_store.recent_messages(room, limit)]
            except StoreUnavailable as exc:
                current_app.logger.error(f"[relay] join sid={sid} room={room} dropped, history unavailable: {exc.__cause__}")
                if newly_joined:
                    with self._lock:
                        rooms = self._memberships.get(sid)
                        if rooms is not None:
                            rooms.discard(room)
                    leave_room(room, sid=sid, namespace=namespace)
                return None
            current_app.logger.info(f"[relay] sid={sid} joined room={room}")
            self._socketio.emit(
                'load_messages',
                {'room': room, 'messages': history},
                to=sid,
                namespace=namespace,
            )
            return history

    def leave(self, sid: str, room, namespace: str = '/') -> None:
        if not _valid_room(room):
            return
        with self._room_lock(room):
            with self._lock:
                rooms = self._memberships.get(sid)
                if rooms is None or room not in rooms:
                    return
                rooms.discard(room)
            leave_room(room, sid=sid, namespace=namespace)
        current_app.logger.info(f"[relay] sid={sid} left room={room}")

    def disconnect(self, sid: str, namespace: str = '/') -> None:
        with self._lock:
            self._connected.discard(sid)
            rooms = self._memberships.pop(sid, set())
        # The socket server drops the sid from its rooms on its own; taking
        # each room lock waits out any broadcast already in flight.
        for room in rooms:
            with self._room_lock(room):
                pass
        current_app.logger.info(f"[relay] sid={sid} disconnected rooms={sorted(rooms)}")

    # ---- messaging ----

    def send(self, sid: str, room, author, text, namespace: str = '/') -> Optional[dict]:
        """Persist a message and broadcast it to the room.

        Returns the delivered payload, or None when the message was ignored
        or could not be stored.
        """
        if not _valid_room(room):
            current_app.logger.info(f"[relay] ignored message without room from sid={sid}")
            return None
        if text is None:
            text = ''
        if not isinstance(text, str):
            current_app.logger.debug(f"[relay] ignored non-text message from sid={sid} room={room}")
            return None

        with self._room_lock(room):
            try:
                message = chat_store.save_message(room, author, text)
            except StoreUnavailable as exc:
                current_app.logger.error(f"[relay] message for room={room} not saved: {exc.__cause__}")
                return None
            payload = message.to_dict()
            self._socketio.emit('chat_message', payload, to=room, namespace=namespace)
        return payload

    # ---- introspection ----

    def rooms_for(self, sid: str) -> Set[str]:
        with self._lock:
            return set(self._memberships.get(sid, ()))

    def members(self, room: str) -> Set[str]:
        with self._lock:
            return {sid for sid, rooms in self._memberships.items() if room in rooms}

    def shutdown(self) -> None:
        with self._lock:
            self._connected.clear()
            self._memberships.clear()

    def _room_lock(self, room: str) -> threading.Lock:
        return self._room_locks[hash(room) % len(self._room_locks)]


def _valid_room(room) -> bool:
    return isinstance(room, str) and room != ''
