import threading

import pytest

from dashboard.errors import SubscriptionError
from dashboard.live import LiveQueryHub, room_for
from dashboard.store import MemoryStore, Subscription


class CountingStore(MemoryStore):

    def __init__(self):
        super().__init__()
        self.subscribe_calls = 0

    def subscribe(self, *args, **kwargs):
        self.subscribe_calls += 1
        return super().subscribe(*args, **kwargs)


class FailingStore(MemoryStore):

    def subscribe(self, *args, **kwargs):
        raise SubscriptionError('permission denied')


class DeferredStore(MemoryStore):
    """Holds back the first snapshot until the test releases it."""

    def __init__(self):
        super().__init__()
        self.subscribed = threading.Event()
        self.release_first = threading.Event()

    def subscribe(self, collection, order_by, on_change, on_error=None, descending=False):
        def deliver():
            self.release_first.wait(5)
            on_change(self._snapshot(collection, order_by, descending))

        threading.Thread(target=deliver, daemon=True).start()
        self.subscribed.set()
        return Subscription(lambda: None)


@pytest.fixture
def sent():
    return []


def _hub(store, sent):
    return LiveQueryHub(store, lambda event, payload, room: sent.append((event, payload, room)))


def test_one_subscription_per_collection(sent):
    store = CountingStore()
    hub = _hub(store, sent)
    hub.ensure('bots')
    hub.ensure('bots')
    assert store.subscribe_calls == 1


def test_changes_are_broadcast_to_the_room(sent):
    store = CountingStore()
    hub = _hub(store, sent)
    hub.ensure('bots')
    store.create('bots', {'name': 'AlphaBot'})

    event, payload, room = sent[-1]
    assert event == 'snapshot'
    assert room == room_for('bots') == 'live:bots'
    assert [r['name'] for r in payload['records']] == ['AlphaBot']
    assert isinstance(payload['records'][0]['created_at'], str)
    assert [r['name'] for r in hub.snapshot('bots')] == ['AlphaBot']


def test_unknown_collection_is_rejected(sent):
    hub = _hub(CountingStore(), sent)
    with pytest.raises(KeyError):
        hub.ensure('user_settings')


def test_subscribe_failure_is_reported(sent):
    hub = _hub(FailingStore(), sent)
    with pytest.raises(SubscriptionError):
        hub.ensure('violations')
    event, payload, room = sent[-1]
    assert event == 'subscription_error'
    assert payload == {'collection': 'violations', 'message': 'Could not fetch violations.'}
    assert hub.snapshot('violations') == []


def test_snapshot_error_keeps_last_records(sent):
    store = CountingStore()
    hub = _hub(store, sent)
    hub.ensure('targets')
    store.create('targets', {'target_name': 'Reading'})
    before = hub.snapshot('targets')

    hub._on_error('targets', SubscriptionError('stream reset'))
    assert hub.snapshot('targets') == before
    assert hub.error('targets') == 'stream reset'
    assert sent[-1][0] == 'subscription_error'


def test_release_unsubscribes(sent):
    store = CountingStore()
    hub = _hub(store, sent)
    hub.ensure('bots')
    hub.release('bots')
    count = len(sent)
    store.create('bots', {'name': 'AlphaBot'})
    assert len(sent) == count
    hub.ensure('bots')
    assert store.subscribe_calls == 2


def test_late_joiner_gets_first_snapshot(sent):
    store = DeferredStore()
    store.create('bots', {'name': 'AlphaBot'})
    hub = _hub(store, sent)
    results = {}

    def join(name):
        results[name] = hub.ensure('bots')

    first = threading.Thread(target=join, args=('first',))
    first.start()
    assert store.subscribed.wait(5)
    second = threading.Thread(target=join, args=('second',))
    second.start()
    second.join(0.1)
    assert second.is_alive()

    store.release_first.set()
    first.join(5)
    second.join(5)
    assert [r['name'] for r in results['first']] == ['AlphaBot']
    assert [r['name'] for r in results['second']] == ['AlphaBot']


def test_missing_first_snapshot_times_out(sent):
    store = DeferredStore()
    hub = LiveQueryHub(store, lambda *args: sent.append(args), first_snapshot_timeout=0.05)
    assert hub.ensure('bots') == []
    store.release_first.set()


def test_close_releases_every_feed(sent):
    store = CountingStore()
    hub = _hub(store, sent)
    hub.ensure('bots')
    hub.ensure('targets')
    hub.close()
    count = len(sent)
    store.create('bots', {'name': 'AlphaBot'})
    store.create('targets', {'target_name': 'Reading'})
    assert len(sent) == count
    assert hub.snapshot('bots') == []
