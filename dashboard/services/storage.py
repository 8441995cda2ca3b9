import base64
import logging
import uuid
from datetime import timedelta

from google.api_core import exceptions as google_exceptions

from dashboard.errors import StoreError
from dashboard.firebase_init import get_bucket

logger = logging.getLogger(__name__)

_EXTENSIONS = {
    'image/png': 'png',
    'image/jpeg': 'jpg',
    'image/gif': 'gif',
    'image/webp': 'webp',
}


def storage_enabled():
    return get_bucket() is not None


def upload_file(file_data, destination_path, content_type=None):
    """Upload file bytes to Firebase Storage.

    Args:
        file_data: bytes or file-like object
        destination_path: path in the bucket (e.g. 'violations/<uuid>.png')
        content_type: MIME type

    Returns:
        The storage path (same as destination_path)
    """
    blob = get_bucket().blob(destination_path)
    try:
        if isinstance(file_data, bytes):
            blob.upload_from_string(file_data, content_type=content_type)
        else:
            blob.upload_from_file(file_data, content_type=content_type)
    except google_exceptions.GoogleAPICallError as exc:
        logger.error('Upload to %s failed', destination_path, exc_info=True)
        raise StoreError('Could not upload the file.') from exc
    return destination_path


def get_signed_url(storage_path, expiration_minutes=60):
    """Signed GET URL for a stored object, or None if it does not exist."""
    blob = get_bucket().blob(storage_path)
    if not blob.exists():
        return None
    return blob.generate_signed_url(
        version='v4',
        expiration=timedelta(minutes=expiration_minutes),
        method='GET'
    )


def to_data_url(file_data, content_type):
    encoded = base64.b64encode(file_data).decode('ascii')
    return f'data:{content_type};base64,{encoded}'


def store_violation_photo(file_storage):
    """Keep a violation's photo proof.

    Uploads to the configured bucket when there is one; otherwise the image
    is kept inline as a base64 data URL. Returns the photo fields to merge
    into the violation document.
    """
    content_type = file_storage.mimetype or 'application/octet-stream'
    file_data = file_storage.read()
    if not storage_enabled():
        return {'photo_proof_base64': to_data_url(file_data, content_type)}

    ext = _EXTENSIONS.get(content_type, 'bin')
    path = upload_file(file_data, f'violations/{uuid.uuid4().hex}.{ext}', content_type)
    return {
        'photo_proof_path': path,
        'photo_proof_url': get_signed_url(path, expiration_minutes=7 * 24 * 60),
    }
