"""
Live query fan-out.

The hub keeps at most one store subscription per live collection and
re-broadcasts every snapshot to the Socket.IO room ``live:<collection>``.
Clients joining late get the cached snapshot straight away.
"""

import logging
import threading

from dashboard.collections import LIVE_COLLECTIONS
from dashboard.serializers import to_jsonable

logger = logging.getLogger(__name__)


def room_for(collection):
    return f'live:{collection}'


class _Feed:

    def __init__(self):
        self.subscription = None
        self.records = []
        self.error = None
        # Set once the first snapshot (or a failure) has arrived
        self.loaded = threading.Event()


class LiveQueryHub:

    def __init__(self, store, broadcast, first_snapshot_timeout=10.0):
        """``broadcast(event, payload, room)`` sends to every client in a room."""
        self._store = store
        self._broadcast = broadcast
        self.first_snapshot_timeout = first_snapshot_timeout
        self._feeds = {}
        self._lock = threading.Lock()

    def is_live(self, collection):
        return collection in LIVE_COLLECTIONS

    def ensure(self, collection):
        """Start the collection's subscription if needed and return its current records.

        Callers block until the feed's first snapshot has arrived, so a
        client joining while another is still subscribing never gets an
        empty list.
        """
        if not self.is_live(collection):
            raise KeyError(collection)
        with self._lock:
            feed = self._feeds.get(collection)
            starting = feed is None
            if starting:
                feed = self._feeds[collection] = _Feed()

        if starting:
            order_by, descending = LIVE_COLLECTIONS[collection]
            try:
                feed.subscription = self._store.subscribe(
                    collection, order_by,
                    on_change=lambda records: self._on_change(collection, records),
                    on_error=lambda error: self._on_error(collection, error),
                    descending=descending,
                )
            except Exception as e:
                with self._lock:
                    self._feeds.pop(collection, None)
                feed.loaded.set()
                self._on_error(collection, e)
                raise
            logger.info('Live feed started for %s', collection)

        if not feed.loaded.wait(self.first_snapshot_timeout):
            logger.warning('No first snapshot for %s after %.1fs', collection,
                           self.first_snapshot_timeout)
        with self._lock:
            return list(feed.records)

    def snapshot(self, collection):
        with self._lock:
            feed = self._feeds.get(collection)
            return list(feed.records) if feed else []

    def error(self, collection):
        with self._lock:
            feed = self._feeds.get(collection)
            return feed.error if feed else None

    def _on_change(self, collection, records):
        with self._lock:
            feed = self._feeds.get(collection)
            if feed is None:
                return
            feed.records = records
            feed.error = None
        feed.loaded.set()
        self._broadcast('snapshot', {
            'collection': collection,
            'records': to_jsonable(records),
        }, room_for(collection))

    def _on_error(self, collection, error):
        # Keep the last good snapshot; the client shows it as stale.
        logger.error('Live feed for %s failed: %s', collection, error)
        with self._lock:
            feed = self._feeds.get(collection)
            if feed is not None:
                feed.error = str(error)
                feed.loaded.set()
        self._broadcast('subscription_error', {
            'collection': collection,
            'message': f'Could not fetch {collection.replace("_", " ")}.',
        }, room_for(collection))

    def release(self, collection):
        with self._lock:
            feed = self._feeds.pop(collection, None)
        if feed:
            feed.loaded.set()
        if feed and feed.subscription:
            feed.subscription.unsubscribe()
            logger.info('Live feed stopped for %s', collection)

    def close(self):
        for collection in list(self._feeds):
            self.release(collection)
