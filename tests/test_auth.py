from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, ADMIN_UID


def test_pages_require_login(client):
    resp = client.get('/bots')
    assert resp.status_code == 401
    assert resp.get_json() == {'error': 'You must be logged in to do that.'}


def test_health(client):
    assert client.get('/health').get_json() == {'status': 'ok'}


def test_login_sets_session(client):
    resp = client.post('/auth/login', json={'email': ADMIN_EMAIL, 'password': ADMIN_PASSWORD})
    assert resp.status_code == 200
    assert resp.get_json()['user']['uid'] == ADMIN_UID
    assert client.get('/bots').status_code == 200


def test_login_wrong_password(client):
    resp = client.post('/auth/login', json={'email': ADMIN_EMAIL, 'password': 'nope'})
    assert resp.status_code == 401
    assert resp.get_json()['error'] == 'Incorrect email or password.'


def test_login_validates_email(client):
    resp = client.post('/auth/login', json={'email': 'not-an-email', 'password': 'x'})
    assert resp.status_code == 400
    assert 'email' in resp.get_json()['fields']


def test_signup_uses_username_as_display_name(client, auth_service):
    resp = client.post('/auth/signup', json={
        'username': 'teacher1', 'email': 'teacher1@example.com', 'password': 'secret1',
    })
    assert resp.status_code == 201
    body = resp.get_json()
    assert body['user']['display_name'] == 'teacher1'
    assert auth_service.get_user(body['uid'])['email'] == 'teacher1@example.com'


def test_signup_duplicate_email(client):
    resp = client.post('/auth/signup', json={
        'username': 'someone', 'email': ADMIN_EMAIL, 'password': 'secret1',
    })
    assert resp.status_code == 401
    assert 'already exists' in resp.get_json()['error']


def test_signup_short_password(client):
    resp = client.post('/auth/signup', json={
        'username': 'teacher1', 'email': 'teacher1@example.com', 'password': '123',
    })
    assert resp.status_code == 400
    assert 'password' in resp.get_json()['fields']


def test_logout(logged_in):
    assert logged_in.post('/auth/logout').status_code == 200
    assert logged_in.get('/bots').status_code == 401


def test_dashboard_summary(logged_in):
    logged_in.post('/targets', json={'target_name': 'Reading', 'status': 'In Progress'})
    logged_in.post('/targets', json={'target_name': 'Math', 'status': 'Done'})
    body = logged_in.get('/dashboard').get_json()
    assert body['user']['username'] == 'Admin User'
    assert body['counts']['targets'] == 2
    assert body['open_targets'] == 1
    assert body['todays_birthdays'] == {'teachers': [], 'students': []}
