import pytest
from firebase_admin import auth as firebase_auth

from dashboard import auth_service as auth_module
from dashboard.auth_service import FirebaseAuthService
from dashboard.errors import AuthError


class FakeResponse:

    def __init__(self, status_code, body=None, content=b'{}'):
        self.status_code = status_code
        self._body = body
        self.content = content

    def json(self):
        if self._body is None:
            raise ValueError('Expecting value: line 1 column 1 (char 0)')
        return self._body


@pytest.fixture
def service(monkeypatch):
    monkeypatch.setattr(auth_module, 'init_firebase', lambda app_config=None: None)
    return FirebaseAuthService('web-api-key')


def _answer(monkeypatch, response):
    monkeypatch.setattr(auth_module.http_requests, 'post', lambda *args, **kwargs: response)


def test_sign_in_returns_id_token(service, monkeypatch):
    _answer(monkeypatch, FakeResponse(200, {'idToken': 'token-123'}))
    assert service.sign_in('admin@example.com', 'secret1') == 'token-123'


def test_sign_in_wrong_password(service, monkeypatch):
    _answer(monkeypatch, FakeResponse(400, {'error': {'message': 'INVALID_LOGIN_CREDENTIALS'}}))
    with pytest.raises(AuthError) as exc:
        service.sign_in('admin@example.com', 'nope')
    assert exc.value.code == 'wrong-password'


def test_sign_in_with_html_error_page(service, monkeypatch):
    _answer(monkeypatch, FakeResponse(502, content=b'<html>Bad Gateway</html>'))
    with pytest.raises(AuthError) as exc:
        service.sign_in('admin@example.com', 'secret1')
    assert exc.value.code == 'sign-in-failed'


def test_verify_session_survives_certificate_fetch_failure(service, monkeypatch):
    def verify(cookie, check_revoked=False):
        raise firebase_auth.CertificateFetchError('could not fetch public keys', None)

    monkeypatch.setattr(firebase_auth, 'verify_session_cookie', verify)
    assert service.verify_session('session:uid-admin') is None


def test_verify_session_invalid_cookie(service, monkeypatch):
    def verify(cookie, check_revoked=False):
        raise firebase_auth.InvalidSessionCookieError('bad cookie')

    monkeypatch.setattr(firebase_auth, 'verify_session_cookie', verify)
    assert service.verify_session('garbage') is None
