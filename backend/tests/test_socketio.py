from pickup import relay
from pickup.services.chat.relay import ROOM_LOCK_STRIPES
from pickup.exceptions import StoreUnavailable
from pickup.models import ChatMessage


ALICE = {'id': 'u1', 'name': 'Alice'}


def _events(test_client, name):
    return [pkt['args'][0] for pkt in test_client.get_received() if pkt['name'] == name]


def _send(test_client, room, text, author=ALICE):
    test_client.emit('chat_message', {'room': room, 'author': author, 'text': text})


def test_socket_connect_and_join(sio_client):
    assert sio_client.is_connected()
    sio_client.emit('join_room', 'r1')
    history = _events(sio_client, 'load_messages')
    assert history == [{'room': 'r1', 'messages': []}]
    assert len(relay.members('r1')) == 1


def test_join_accepts_object_payload(sio_client):
    sio_client.emit('join_room', {'room': 'lobby'})
    assert _events(sio_client, 'load_messages')[0]['room'] == 'lobby'


def test_message_round_trip(sio_client, sio_factory):
    other = sio_factory()
    sio_client.emit('join_room', 'r1')
    other.emit('join_room', 'r1')
    sio_client.get_received()
    other.get_received()

    _send(sio_client, 'r1', 'hi')

    mine = _events(sio_client, 'chat_message')
    theirs = _events(other, 'chat_message')
    assert mine == theirs
    assert len(mine) == 1
    msg = mine[0]
    assert msg['room'] == 'r1'
    assert msg['author'] == ALICE
    assert msg['text'] == 'hi'
    assert msg['id'] is not None
    assert msg['createdAt']
    assert ChatMessage.query.count() == 1


def test_messages_stay_in_their_room(sio_client, sio_factory):
    other = sio_factory()
    sio_client.emit('join_room', 'r1')
    other.emit('join_room', 'r2')
    other.get_received()

    _send(sio_client, 'r1', 'only for r1')
    assert _events(other, 'chat_message') == []


def test_history_replay_then_live_in_order(sio_client, sio_factory):
    sio_client.emit('join_room', 'r1')
    _send(sio_client, 'r1', 'm1')
    _send(sio_client, 'r1', 'm2')

    late = sio_factory()
    late.emit('join_room', 'r1')
    history = _events(late, 'load_messages')[0]['messages']
    assert [m['text'] for m in history] == ['m1', 'm2']

    _send(sio_client, 'r1', 'm3')
    _send(sio_client, 'r1', 'm4')
    live = _events(late, 'chat_message')
    assert [m['text'] for m in live] == ['m3', 'm4']
    seen_ids = [m['id'] for m in history + live]
    assert len(seen_ids) == len(set(seen_ids))
    assert seen_ids == sorted(seen_ids)


def test_history_is_most_recent_window(flask_app, sio_client, sio_factory):
    flask_app.config['CHAT_HISTORY_LIMIT'] = 2
    for text in ('a', 'b', 'c'):
        _send(sio_client, 'r1', text)

    late = sio_factory()
    late.emit('join_room', 'r1')
    history = _events(late, 'load_messages')[0]['messages']
    assert [m['text'] for m in history] == ['b', 'c']


def test_history_goes_only_to_joiner(sio_client, sio_factory):
    sio_client.emit('join_room', 'r1')
    sio_client.get_received()
    other = sio_factory()
    other.emit('join_room', 'r1')
    assert _events(sio_client, 'load_messages') == []


def test_empty_room_is_ignored(sio_client):
    sio_client.emit('join_room', '')
    sio_client.emit('join_room', None)
    sio_client.emit('chat_message', {'author': ALICE, 'text': 'no room'})
    sio_client.emit('chat_message', {'room': '', 'text': 'empty room'})
    sio_client.emit('chat_message', 'not a dict')
    assert sio_client.get_received() == []
    assert ChatMessage.query.count() == 0
    assert relay.members('') == set()
    assert relay.members(None) == set()
    assert sio_client.is_connected()


def test_leave_then_disconnect_stops_delivery(sio_client, sio_factory):
    other = sio_factory()
    sio_client.emit('join_room', 'r1')
    other.emit('join_room', 'r1')
    other.get_received()
    assert len(relay.members('r1')) == 2

    other.emit('leave_room', 'r1')
    assert len(relay.members('r1')) == 1
    _send(sio_client, 'r1', 'after leave')
    assert _events(other, 'chat_message') == []

    other.disconnect()
    _send(sio_client, 'r1', 'after disconnect')
    assert len(relay.members('r1')) == 1
    assert [m['text'] for m in _events(sio_client, 'chat_message')] == ['after leave', 'after disconnect']


def test_leave_room_not_joined_is_harmless(sio_client):
    sio_client.emit('leave_room', 'never-joined')
    assert sio_client.is_connected()
    assert sio_client.get_received() == []


def test_disconnect_clears_all_rooms(sio_client, sio_factory):
    other = sio_factory()
    other.emit('join_room', 'r1')
    other.emit('join_room', 'r2')
    assert len(relay.members('r1')) == 1
    other.disconnect()
    assert relay.members('r1') == set()
    assert relay.members('r2') == set()


def test_store_failure_suppresses_broadcast(sio_client, monkeypatch):
    sio_client.emit('join_room', 'r1')
    sio_client.get_received()

    def failing_save(room, author, text):
        raise StoreUnavailable('Error saving message')

    monkeypatch.setattr('pickup.services.chat.messages.save_message', failing_save)
    _send(sio_client, 'r1', 'lost')
    assert _events(sio_client, 'chat_message') == []
    assert sio_client.is_connected()

    monkeypatch.undo()
    _send(sio_client, 'r1', 'kept')
    assert [m['text'] for m in _events(sio_client, 'chat_message')] == ['kept']


def test_join_game_broadcasts_update(client, sio_client, sio_factory):
    watcher = sio_factory()
    game = client.post('/api/games', json={'title': 'Futsal', 'sport': 'Soccer'}).get_json()
    sio_client.get_received()
    watcher.get_received()

    res = client.put(f"/api/games/{game['id']}/join")
    assert res.status_code == 200

    for test_client in (sio_client, watcher):
        updates = _events(test_client, 'update_game')
        assert len(updates) == 1
        assert updates[0]['id'] == game['id']
        assert updates[0]['players'] == 1


def test_full_game_does_not_broadcast(client, sio_client):
    game = client.post('/api/games', json={'title': 'Full', 'players': 6}).get_json()
    sio_client.get_received()
    res = client.put(f"/api/games/{game['id']}/join")
    assert res.status_code == 400
    assert _events(sio_client, 'update_game') == []


def test_room_names_do_not_grow_lock_table(sio_client):
    for i in range(500):
        sio_client.emit('leave_room', f'ghost-{i}')
    for i in range(100):
        sio_client.emit('join_room', f'room-{i}')
        sio_client.emit('leave_room', f'room-{i}')
    assert len(relay._room_locks) == ROOM_LOCK_STRIPES
    assert relay.members('room-0') == set()
    assert sio_client.is_connected()


def test_history_failure_undoes_join(sio_client, sio_factory, monkeypatch):
    def failing_history(room, limit):
        raise StoreUnavailable('Error loading messages')

    monkeypatch.setattr('pickup.services.chat.messages.recent_messages', failing_history)
    sio_client.emit('join_room', 'r1')
    assert relay.members('r1') == set()
    assert sio_client.get_received() == []
    monkeypatch.undo()

    speaker = sio_factory()
    speaker.emit('join_room', 'r1')
    _send(speaker, 'r1', 'not for the failed joiner')
    assert _events(sio_client, 'chat_message') == []
    assert sio_client.is_connected()
