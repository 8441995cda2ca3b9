from datetime import datetime, timedelta, timezone

import pytest

from config import TestConfig
from dashboard import create_app, shutdown
from dashboard.auth_service import AuthService
from dashboard.errors import AuthError
from dashboard.store import MemoryStore

ADMIN_UID = 'uid-admin'
ADMIN_EMAIL = 'admin@example.com'
ADMIN_PASSWORD = 'secret1'


class FakeAuthService(AuthService):
    """In-memory identity provider with the same error codes as Firebase."""

    def __init__(self):
        self.users = {}
        self.sessions = {}

    def add_user(self, uid, email, password, display_name=None):
        self.users[uid] = {'uid': uid, 'email': email, 'password': password,
                           'display_name': display_name}

    def sign_in(self, email, password):
        for user in self.users.values():
            if user['email'] == email:
                if user['password'] != password:
                    break
                return f'token:{user["uid"]}'
        raise AuthError('wrong-password', 'Incorrect email or password.')

    def create_session(self, id_token):
        uid = id_token.split(':', 1)[1]
        cookie = f'session:{uid}'
        self.sessions[cookie] = uid
        return cookie

    def verify_session(self, session_cookie):
        uid = self.sessions.get(session_cookie)
        if uid not in self.users:
            return None
        return self.get_user(uid)

    def sign_up(self, email, password, display_name):
        if any(u['email'] == email for u in self.users.values()):
            raise AuthError('email-already-in-use', 'An account with this email already exists.')
        uid = f'uid-{len(self.users) + 1}'
        self.add_user(uid, email, password, display_name)
        return uid

    def get_user(self, uid):
        user = self.users[uid]
        return {'uid': uid, 'email': user['email'], 'display_name': user['display_name']}

    def update_profile(self, uid, display_name):
        self.users[uid]['display_name'] = display_name

    def change_password(self, uid, email, current_password, new_password):
        self.sign_in(email, current_password)
        self.users[uid]['password'] = new_password


class TickingClock:
    """Store clock that advances one second per call."""

    def __init__(self, start=datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self):
        self.now = self.now + timedelta(seconds=1)
        return self.now


@pytest.fixture
def store():
    return MemoryStore(clock=TickingClock())


@pytest.fixture
def auth_service():
    service = FakeAuthService()
    service.add_user(ADMIN_UID, ADMIN_EMAIL, ADMIN_PASSWORD, 'Admin User')
    return service


@pytest.fixture
def app(store, auth_service):
    app = create_app(TestConfig, store=store, auth_service=auth_service)
    yield app
    shutdown(app)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def logged_in(client, auth_service):
    cookie = auth_service.create_session(f'token:{ADMIN_UID}')
    with client.session_transaction() as sess:
        sess['firebase_session'] = cookie
    return client
