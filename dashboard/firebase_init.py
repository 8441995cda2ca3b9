import json
import logging
import os

import firebase_admin
from firebase_admin import credentials, firestore, storage, auth

logger = logging.getLogger(__name__)

_app = None
_db = None
_bucket = None


def _load_credentials():
    """Service-account JSON from the environment, a key file, or ADC."""
    raw = os.environ.get('FIREBASE_CREDENTIALS_JSON')
    if raw:
        return credentials.Certificate(json.loads(raw))

    cred_path = os.environ.get('GOOGLE_APPLICATION_CREDENTIALS', './firebase-service-account.json')
    if os.path.exists(cred_path):
        return credentials.Certificate(cred_path)
    return credentials.ApplicationDefault()


def init_firebase(app_config=None):
    """Initialise the default Firebase app once per process.

    Only the Firestore-backed store and the Firebase auth service call this;
    the memory backend never touches Google credentials.
    """
    global _app, _db, _bucket

    if _app is not None:
        return _app

    app_config = app_config or {}
    bucket_name = app_config.get('FIREBASE_STORAGE_BUCKET') or os.environ.get('FIREBASE_STORAGE_BUCKET', '')
    project_id = app_config.get('FIREBASE_PROJECT_ID') or os.environ.get('FIREBASE_PROJECT_ID', '')

    options = {}
    if bucket_name:
        options['storageBucket'] = bucket_name
    if project_id:
        options['projectId'] = project_id

    _app = firebase_admin.initialize_app(_load_credentials(), options=options or None)
    _db = firestore.client()
    if bucket_name:
        _bucket = storage.bucket()

    logger.info('Firebase initialised (project=%s, bucket=%s)',
                project_id or 'default', bucket_name or 'none')
    return _app


def get_db():
    if _db is None:
        init_firebase()
    return _db


def get_bucket():
    """The configured Storage bucket, or None when uploads are disabled."""
    return _bucket


def get_auth():
    return auth
