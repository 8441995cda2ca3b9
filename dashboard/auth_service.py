"""
Identity operations behind one injectable interface.

``FirebaseAuthService`` verifies passwords through the Identity Toolkit
REST endpoint (the Admin SDK cannot check a password) and does everything
else through ``firebase_admin.auth``.
"""

import logging
from datetime import timedelta

import requests as http_requests
from firebase_admin import exceptions as firebase_exceptions

from dashboard.errors import AuthError
from dashboard.firebase_init import get_auth, init_firebase

logger = logging.getLogger(__name__)

FIREBASE_SIGN_IN_URL = (
    'https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword'
)

_WRONG_PASSWORD_CODES = ('INVALID_PASSWORD', 'INVALID_LOGIN_CREDENTIALS', 'EMAIL_NOT_FOUND')


def _user_record_to_dict(record):
    return {
        'uid': record.uid,
        'email': record.email,
        'display_name': record.display_name,
    }


class AuthService:

    def sign_in(self, email, password):
        """Return an ID token for valid credentials, raise AuthError otherwise."""
        raise NotImplementedError

    def create_session(self, id_token):
        raise NotImplementedError

    def verify_session(self, session_cookie):
        """Return the signed-in user's dict, or None for a bad/expired cookie."""
        raise NotImplementedError

    def sign_up(self, email, password, display_name):
        raise NotImplementedError

    def get_user(self, uid):
        raise NotImplementedError

    def update_profile(self, uid, display_name):
        raise NotImplementedError

    def change_password(self, uid, email, current_password, new_password):
        raise NotImplementedError


class FirebaseAuthService(AuthService):

    def __init__(self, api_key, session_days=5, app_config=None):
        init_firebase(app_config)
        self._api_key = api_key
        self._session_length = timedelta(days=session_days)

    def sign_in(self, email, password):
        if not self._api_key:
            raise AuthError('configuration-missing', 'Sign-in is not configured.')
        try:
            resp = http_requests.post(
                f'{FIREBASE_SIGN_IN_URL}?key={self._api_key}',
                json={
                    'email': email,
                    'password': password,
                    'returnSecureToken': True,
                },
                timeout=10,
            )
        except http_requests.RequestException as e:
            logger.error('Identity Toolkit request failed: %s', e, exc_info=True)
            raise AuthError('network-request-failed', 'Could not reach the sign-in service.') from e

        try:
            body = resp.json() if resp.content else {}
        except ValueError:
            logger.error('Identity Toolkit answered %s with a non-JSON body', resp.status_code)
            raise AuthError('sign-in-failed', 'Sign-in failed.') from None
        if not isinstance(body, dict):
            body = {}

        if resp.status_code == 200:
            return body.get('idToken')

        reason = (body.get('error') or {}).get('message', '')
        if reason.split(' ')[0] in _WRONG_PASSWORD_CODES:
            raise AuthError('wrong-password', 'Incorrect email or password.')
        if reason.startswith('TOO_MANY_ATTEMPTS'):
            raise AuthError('too-many-requests', 'Too many attempts. Try again later.')
        raise AuthError('sign-in-failed', 'Sign-in failed.')

    def create_session(self, id_token):
        try:
            return get_auth().create_session_cookie(id_token, expires_in=self._session_length)
        except firebase_exceptions.FirebaseError as e:
            logger.error('Could not create a session cookie: %s', e, exc_info=True)
            raise AuthError('session-failed', 'Could not start a session.') from e

    def verify_session(self, session_cookie):
        auth = get_auth()
        try:
            decoded = auth.verify_session_cookie(session_cookie, check_revoked=True)
            return self.get_user(decoded['uid'])
        except (auth.InvalidSessionCookieError, auth.RevokedSessionCookieError,
                auth.UserNotFoundError, auth.UserDisabledError):
            return None
        except firebase_exceptions.FirebaseError as e:
            logger.error('Session verification failed: %s', e, exc_info=True)
            return None

    def sign_up(self, email, password, display_name):
        auth = get_auth()
        try:
            record = auth.create_user(email=email, password=password, display_name=display_name)
        except auth.EmailAlreadyExistsError as e:
            raise AuthError('email-already-in-use', 'An account with this email already exists.') from e
        except firebase_exceptions.FirebaseError as e:
            logger.error('Sign-up for %s failed: %s', email, e, exc_info=True)
            raise AuthError('sign-up-failed', 'Could not create the account.') from e
        return record.uid

    def get_user(self, uid):
        return _user_record_to_dict(get_auth().get_user(uid))

    def update_profile(self, uid, display_name):
        try:
            get_auth().update_user(uid, display_name=display_name)
        except firebase_exceptions.FirebaseError as e:
            logger.error('Profile update for %s failed: %s', uid, e, exc_info=True)
            raise AuthError('update-failed', 'Could not update the profile.') from e

    def change_password(self, uid, email, current_password, new_password):
        # Re-authenticate with the current password first
        self.sign_in(email, current_password)
        try:
            get_auth().update_user(uid, password=new_password)
        except firebase_exceptions.FirebaseError as e:
            logger.error('Password change for %s failed: %s', uid, e, exc_info=True)
            raise AuthError('update-failed', 'Could not change the password.') from e


def build_auth_service(config):
    return FirebaseAuthService(
        config.get('FIREBASE_WEB_API_KEY', ''),
        session_days=config.get('SESSION_DAYS', 5),
        app_config=config,
    )
