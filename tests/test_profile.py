from conftest import ADMIN_PASSWORD, ADMIN_UID


def test_profile_shows_identity(logged_in):
    user = logged_in.get('/profile').get_json()['user']
    assert user['display_name'] == 'Admin User'
    assert user['initial'] == 'A'


def test_update_display_name(logged_in, auth_service):
    resp = logged_in.post('/profile', json={'display_name': 'Principal Reyes'})
    assert resp.status_code == 200
    assert resp.get_json()['user']['display_name'] == 'Principal Reyes'
    assert auth_service.users[ADMIN_UID]['display_name'] == 'Principal Reyes'


def test_display_name_too_short(logged_in, auth_service):
    resp = logged_in.post('/profile', json={'display_name': 'Al'})
    assert resp.status_code == 400
    assert auth_service.users[ADMIN_UID]['display_name'] == 'Admin User'


def test_password_confirmation_must_match(logged_in, auth_service):
    resp = logged_in.post('/profile/password', json={
        'current_password': ADMIN_PASSWORD,
        'new_password': 'newsecret',
        'confirm_password': 'different',
    })
    assert resp.status_code == 400
    assert resp.get_json()['fields']['confirm_password'] == ["New passwords don't match."]
    assert auth_service.users[ADMIN_UID]['password'] == ADMIN_PASSWORD


def test_new_password_minimum_length(logged_in):
    resp = logged_in.post('/profile/password', json={
        'current_password': ADMIN_PASSWORD,
        'new_password': 'abc',
        'confirm_password': 'abc',
    })
    assert resp.status_code == 400
    assert 'new_password' in resp.get_json()['fields']


def test_wrong_current_password(logged_in, auth_service):
    resp = logged_in.post('/profile/password', json={
        'current_password': 'guess',
        'new_password': 'newsecret',
        'confirm_password': 'newsecret',
    })
    assert resp.status_code == 400
    assert resp.get_json()['error'] == 'Incorrect current password.'
    assert auth_service.users[ADMIN_UID]['password'] == ADMIN_PASSWORD


def test_change_password(logged_in, auth_service):
    resp = logged_in.post('/profile/password', json={
        'current_password': ADMIN_PASSWORD,
        'new_password': 'newsecret',
        'confirm_password': 'newsecret',
    })
    assert resp.status_code == 200
    assert auth_service.users[ADMIN_UID]['password'] == 'newsecret'


def test_settings_defaults(logged_in):
    settings = logged_in.get('/settings').get_json()['settings']
    assert settings['theme'] == 'light'
    assert settings['email_notifications'] is True


def test_settings_partial_update(logged_in, store):
    logged_in.post('/settings', json={'theme': 'dark', 'push_notifications': True})
    logged_in.post('/settings', json={'notification_frequency': 'weekly'})
    doc = store.get('user_settings', ADMIN_UID)
    assert doc['theme'] == 'dark'
    assert doc['push_notifications'] is True
    assert doc['notification_frequency'] == 'weekly'


def test_settings_rejects_unknown_theme(logged_in):
    assert logged_in.post('/settings', json={'theme': 'neon'}).status_code == 400


def test_settings_body_must_be_an_object(logged_in, store):
    resp = logged_in.post('/settings', json=['dark'])
    assert resp.status_code == 400
    assert resp.get_json() == {'error': 'Settings must be sent as a JSON object.'}
    assert store.get('user_settings', ADMIN_UID) is None
