"""
Document store layer.

Pages never talk to Firestore directly: they receive a ``Store`` through the
app factory and call the operations below. Two backends exist:

  - ``FirestoreStore``: Cloud Firestore through firebase-admin, with live
    ``on_snapshot`` watches and server-assigned timestamps.
  - ``MemoryStore``: a process-local backend used for local runs
    (``STORE_BACKEND=memory``) and by the test suite.

Records travel as plain dicts carrying their document ID under ``'id'``.
Collection arguments may be sub-collection paths such as
``projects/<id>/tasks``.
"""

import copy
import logging
import random
import string
import threading
from collections import defaultdict
from datetime import datetime, timezone

from google.api_core import exceptions as google_exceptions
from google.cloud.firestore_v1 import SERVER_TIMESTAMP, FieldFilter, Query

from dashboard.errors import StoreError, RecordNotFound, SubscriptionError

logger = logging.getLogger(__name__)


def _now():
    return datetime.now(timezone.utc)


def _doc_to_dict(doc_snapshot):
    """Convert a Firestore DocumentSnapshot to a dict with 'id' field."""
    if not doc_snapshot.exists:
        return None
    d = doc_snapshot.to_dict()
    d['id'] = doc_snapshot.id
    return d


class Subscription:
    """Handle for a live query. Call :meth:`unsubscribe` to release it."""

    def __init__(self, cancel):
        self._cancel = cancel
        self.active = True

    def unsubscribe(self):
        if self.active:
            self.active = False
            self._cancel()


class Store:
    """Interface every backend implements."""

    def subscribe(self, collection, order_by, on_change, on_error=None, descending=False):
        raise NotImplementedError

    def list(self, collection, order_by=None, descending=False, where=None):
        raise NotImplementedError

    def get(self, collection, doc_id):
        raise NotImplementedError

    def create(self, collection, data):
        raise NotImplementedError

    def set(self, collection, doc_id, data, merge=False):
        raise NotImplementedError

    def update(self, collection, doc_id, data):
        raise NotImplementedError

    def delete(self, collection, doc_id):
        raise NotImplementedError

    def count(self, collection, where=None):
        return len(self.list(collection, where=where))


# ---------------------------------------------------------------------------
# Firestore
# ---------------------------------------------------------------------------

class FirestoreStore(Store):

    def __init__(self, db):
        self._db = db

    def _query(self, collection, order_by=None, descending=False, where=None):
        query = self._db.collection(collection)
        for field, op, value in where or ():
            query = query.where(filter=FieldFilter(field, op, value))
        if order_by:
            direction = Query.DESCENDING if descending else Query.ASCENDING
            query = query.order_by(order_by, direction=direction)
        return query

    def subscribe(self, collection, order_by, on_change, on_error=None, descending=False):
        query = self._query(collection, order_by, descending)

        def on_snapshot(docs, changes, read_time):
            try:
                on_change([_doc_to_dict(doc) for doc in docs])
            except Exception as e:
                logger.exception('Live query on %s failed while processing a snapshot', collection)
                if on_error:
                    on_error(SubscriptionError(str(e)))

        try:
            watch = query.on_snapshot(on_snapshot)
        except google_exceptions.GoogleAPICallError as e:
            logger.error('Could not subscribe to %s: %s', collection, e, exc_info=True)
            raise SubscriptionError() from e
        logger.debug('Subscribed to %s ordered by %s', collection, order_by)
        return Subscription(watch.unsubscribe)

    def list(self, collection, order_by=None, descending=False, where=None):
        try:
            query = self._query(collection, order_by, descending, where)
            return [_doc_to_dict(doc) for doc in query.stream()]
        except google_exceptions.GoogleAPICallError as e:
            logger.error('Reading %s failed: %s', collection, e, exc_info=True)
            raise StoreError() from e

    def get(self, collection, doc_id):
        try:
            return _doc_to_dict(self._db.collection(collection).document(doc_id).get())
        except google_exceptions.GoogleAPICallError as e:
            logger.error('Reading %s/%s failed: %s', collection, doc_id, e, exc_info=True)
            raise StoreError() from e

    def create(self, collection, data):
        data = dict(data)
        data['created_at'] = SERVER_TIMESTAMP
        data['updated_at'] = SERVER_TIMESTAMP
        try:
            _, doc_ref = self._db.collection(collection).add(data)
        except google_exceptions.GoogleAPICallError as e:
            logger.error('Creating a document in %s failed: %s', collection, e, exc_info=True)
            raise StoreError() from e
        return doc_ref.id

    def set(self, collection, doc_id, data, merge=False):
        data = dict(data)
        data['updated_at'] = SERVER_TIMESTAMP
        try:
            self._db.collection(collection).document(doc_id).set(data, merge=merge)
        except google_exceptions.GoogleAPICallError as e:
            logger.error('Writing %s/%s failed: %s', collection, doc_id, e, exc_info=True)
            raise StoreError() from e

    def update(self, collection, doc_id, data):
        data = dict(data)
        data.pop('id', None)
        data['updated_at'] = SERVER_TIMESTAMP
        try:
            self._db.collection(collection).document(doc_id).update(data)
        except google_exceptions.NotFound as e:
            raise RecordNotFound() from e
        except google_exceptions.GoogleAPICallError as e:
            logger.error('Updating %s/%s failed: %s', collection, doc_id, e, exc_info=True)
            raise StoreError() from e

    def delete(self, collection, doc_id):
        try:
            self._db.collection(collection).document(doc_id).delete()
        except google_exceptions.GoogleAPICallError as e:
            logger.error('Deleting %s/%s failed: %s', collection, doc_id, e, exc_info=True)
            raise StoreError() from e


# ---------------------------------------------------------------------------
# In-process memory
# ---------------------------------------------------------------------------

_ID_CHARS = string.ascii_letters + string.digits

_OPERATORS = {
    '==': lambda a, b: a == b,
    '!=': lambda a, b: a != b,
    '<': lambda a, b: a is not None and a < b,
    '<=': lambda a, b: a is not None and a <= b,
    '>': lambda a, b: a is not None and a > b,
    '>=': lambda a, b: a is not None and a >= b,
    'in': lambda a, b: a in b,
}


class MemoryStore(Store):
    """Dict-backed store with synchronous change delivery.

    Subscribers are notified after every write to their collection with the
    full ordered result set, the same contract as a Firestore watch.
    Like Firestore, an ordered query leaves out documents lacking the
    ``order_by`` field.
    """

    def __init__(self, clock=_now):
        self._docs = defaultdict(dict)
        self._watchers = defaultdict(list)
        self._lock = threading.RLock()
        self._clock = clock

    def _new_id(self):
        return ''.join(random.choices(_ID_CHARS, k=20))

    def _snapshot(self, collection, order_by=None, descending=False, where=None):
        with self._lock:
            items = [dict(copy.deepcopy(data), id=doc_id)
                     for doc_id, data in self._docs[collection].items()]
        for field, op, value in where or ():
            items = [d for d in items if _OPERATORS[op](d.get(field), value)]
        if order_by:
            items = [d for d in items if d.get(order_by) is not None]
            items.sort(key=lambda d: d[order_by], reverse=descending)
        return items

    def _notify(self, collection):
        with self._lock:
            watchers = list(self._watchers[collection])
        for watcher in watchers:
            order_by, descending, on_change, on_error = watcher
            try:
                on_change(self._snapshot(collection, order_by, descending))
            except Exception as e:
                logger.exception('Live query on %s failed while processing a snapshot', collection)
                if on_error:
                    on_error(SubscriptionError(str(e)))

    def subscribe(self, collection, order_by, on_change, on_error=None, descending=False):
        watcher = (order_by, descending, on_change, on_error)
        with self._lock:
            self._watchers[collection].append(watcher)

        def cancel():
            with self._lock:
                if watcher in self._watchers[collection]:
                    self._watchers[collection].remove(watcher)

        try:
            on_change(self._snapshot(collection, order_by, descending))
        except Exception as e:
            logger.exception('Live query on %s failed on its first snapshot', collection)
            if on_error:
                on_error(SubscriptionError(str(e)))
        return Subscription(cancel)

    def list(self, collection, order_by=None, descending=False, where=None):
        return self._snapshot(collection, order_by, descending, where)

    def get(self, collection, doc_id):
        with self._lock:
            data = self._docs[collection].get(doc_id)
            if data is None:
                return None
            return dict(copy.deepcopy(data), id=doc_id)

    def create(self, collection, data):
        now = self._clock()
        data = copy.deepcopy(dict(data))
        data.pop('id', None)
        data['created_at'] = now
        data['updated_at'] = now
        with self._lock:
            doc_id = self._new_id()
            self._docs[collection][doc_id] = data
        self._notify(collection)
        return doc_id

    def set(self, collection, doc_id, data, merge=False):
        data = copy.deepcopy(dict(data))
        data.pop('id', None)
        data['updated_at'] = self._clock()
        with self._lock:
            if merge and doc_id in self._docs[collection]:
                self._docs[collection][doc_id].update(data)
            else:
                self._docs[collection][doc_id] = data
        self._notify(collection)

    def update(self, collection, doc_id, data):
        data = copy.deepcopy(dict(data))
        data.pop('id', None)
        data['updated_at'] = self._clock()
        with self._lock:
            if doc_id not in self._docs[collection]:
                raise RecordNotFound()
            self._docs[collection][doc_id].update(data)
        self._notify(collection)

    def delete(self, collection, doc_id):
        with self._lock:
            self._docs[collection].pop(doc_id, None)
        self._notify(collection)


def build_store(config):
    """Create the backend named by ``STORE_BACKEND``."""
    backend = config.get('STORE_BACKEND', 'firestore')
    if backend == 'memory':
        logger.warning('Using the in-memory store; data will not survive a restart')
        return MemoryStore()
    if backend == 'firestore':
        from dashboard.firebase_init import init_firebase, get_db
        init_firebase(config)
        return FirestoreStore(get_db())
    raise ValueError(f'Unknown STORE_BACKEND: {backend!r}')
