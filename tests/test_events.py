import pytest

from dashboard import shutdown, socketio


@pytest.fixture
def socket_client(app, logged_in):
    client = socketio.test_client(app, flask_test_client=logged_in)
    yield client
    if client.is_connected():
        client.disconnect()


def _events(client, name):
    return [e['args'][0] for e in client.get_received() if e['name'] == name]


def test_anonymous_connection_is_refused(app, client):
    anonymous = socketio.test_client(app, flask_test_client=client)
    assert not anonymous.is_connected()


def test_connect_greets_user(socket_client):
    greeting = _events(socket_client, 'connected')
    assert greeting == [{'user_id': 'uid-admin', 'username': 'Admin User'}]


def test_subscribe_sends_snapshot_and_changes(socket_client, store):
    store.create('bots', {'name': 'AlphaBot'})
    socket_client.get_received()

    socket_client.emit('subscribe', {'collection': 'bots'})
    snapshots = _events(socket_client, 'snapshot')
    assert snapshots[-1]['collection'] == 'bots'
    assert [r['name'] for r in snapshots[-1]['records']] == ['AlphaBot']

    store.create('bots', {'name': 'BetaTasker'})
    snapshots = _events(socket_client, 'snapshot')
    assert [r['name'] for r in snapshots[-1]['records']] == ['AlphaBot', 'BetaTasker']


def test_subscribe_unknown_collection(socket_client):
    socket_client.get_received()
    socket_client.emit('subscribe', {'collection': 'user_settings'})
    assert _events(socket_client, 'subscription_error') == [
        {'collection': 'user_settings', 'message': 'Unknown collection.'}
    ]


def test_unsubscribe_stops_updates(socket_client, store):
    socket_client.emit('subscribe', {'collection': 'bots'})
    socket_client.emit('unsubscribe', {'collection': 'bots'})
    socket_client.get_received()
    store.create('bots', {'name': 'AlphaBot'})
    assert _events(socket_client, 'snapshot') == []


def test_countdowns_cancelled_on_disconnect(app, socket_client, store):
    birthday_id = store.create('birthday_events', {'name': 'Ana', 'type': 'Student',
                                                   'grade': '7', 'anchor_date': '2012-05-10'})
    countdowns = app.extensions['dashboard']['countdowns']

    socket_client.emit('watch_countdowns', {'ids': [birthday_id, 'missing']})
    assert _events(socket_client, 'countdowns_started') == [{'ids': [birthday_id]}]
    assert countdowns.active() == [birthday_id]

    socket_client.disconnect()
    assert countdowns.active() == []


def test_unwatch_countdowns(app, socket_client, store):
    birthday_id = store.create('birthday_events', {'name': 'Ana', 'type': 'Teacher',
                                                   'anchor_date': '1985-12-01'})
    countdowns = app.extensions['dashboard']['countdowns']
    socket_client.emit('watch_countdowns', {'ids': [birthday_id]})
    socket_client.emit('unwatch_countdowns', {'ids': [birthday_id]})
    assert countdowns.active() == []


def test_shutdown_stops_timers_and_feeds(app, socket_client, store):
    birthday_id = store.create('birthday_events', {'name': 'Ana', 'type': 'Teacher',
                                                   'anchor_date': '1985-12-01'})
    socket_client.emit('subscribe', {'collection': 'bots'})
    socket_client.emit('watch_countdowns', {'ids': [birthday_id]})
    deps = app.extensions['dashboard']

    shutdown(app)
    assert deps['countdowns'].active() == []
    socket_client.get_received()
    store.create('bots', {'name': 'AlphaBot'})
    assert _events(socket_client, 'snapshot') == []
