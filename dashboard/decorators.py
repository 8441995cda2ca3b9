from functools import wraps
from flask import jsonify, g, session

from dashboard.context import get_auth_service


def _verify_session():
    """Verify the Firebase session cookie and return the user's identity."""
    session_cookie = session.get('firebase_session')
    if not session_cookie:
        return None
    return get_auth_service().verify_session(session_cookie)


class CurrentUser:
    """Proxy object providing attribute access to the current user dict."""

    def __init__(self, data=None):
        self._data = data or {}

    def __getattr__(self, name):
        if name.startswith('_'):
            raise AttributeError(name)
        return self._data.get(name)

    def get(self, key, default=None):
        return self._data.get(key, default)

    @property
    def is_authenticated(self):
        return bool(self._data)

    @property
    def uid(self):
        return self._data.get('uid', '')

    @property
    def id(self):
        return self.uid

    @property
    def username(self):
        """Display name, else the local part of the email."""
        if self._data.get('display_name'):
            return self._data['display_name']
        email = self._data.get('email')
        if email:
            return email.split('@')[0]
        return None

    @property
    def initial(self):
        name = self.username
        return name[0].upper() if name else 'U'

    def to_dict(self):
        return {
            'uid': self.uid,
            'email': self._data.get('email'),
            'display_name': self._data.get('display_name'),
            'username': self.username,
            'initial': self.initial,
        }


def load_current_user():
    """Load current user into g before each request."""
    if hasattr(g, '_current_user'):
        return
    g._current_user = CurrentUser(_verify_session())


def get_current_user():
    if not hasattr(g, '_current_user'):
        load_current_user()
    return g._current_user


def refresh_current_user():
    g.pop('_current_user', None)
    return get_current_user()


def auth_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        user = get_current_user()
        if not user.is_authenticated:
            return jsonify({'error': 'You must be logged in to do that.'}), 401
        g.current_user = user
        return f(*args, **kwargs)
    return decorated
