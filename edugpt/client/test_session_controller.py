# edugpt/client/test_session_controller.py
import threading
from unittest.mock import MagicMock

import pytest

from edugpt.client.identity import IdentitySession
from edugpt.client.session import SessionController, View
from edugpt.client.storage import ClientStorage
from edugpt.core.exceptions import IdentityError, ApiError

LOGIN_FORM = {'email': ' a@b.com ', 'password': 'secret1', 'role': 'student'}
SIGNUP_FORM = {
    'firstName': 'Ann', 'lastName': 'Lee', 'email': 'a@b.com',
    'password': 'secret1', 'confirmPassword': 'secret1', 'role': 'educator'
}


@pytest.fixture
def storage():
    return ClientStorage()

@pytest.fixture
def identity():
    identity = MagicMock()
    identity.sign_in.return_value = IdentitySession(uid='uid-1', email='a@b.com', id_token='id-token')
    identity.sign_up.return_value = IdentitySession(uid='uid-2', email='a@b.com', id_token='new-token')
    return identity

@pytest.fixture
def api():
    return MagicMock()

@pytest.fixture
def background():
    """백그라운드 작업을 즉시 실행하지 않고 모아 둡니다."""
    return []

@pytest.fixture
def controller(storage, identity, api, background):
    return SessionController(storage, identity, api, run_in_background=background.append)


# --- 화면 결정 ---

def test_start_clears_previous_auth_and_redirects_dashboard_to_login(controller, storage):
    storage.store_auth({'uid': 'u', 'email': 'a@b.com', 'role': 'student'}, 'old-token')
    state = controller.start(View.DASHBOARD)
    assert state.view is View.LOGIN
    assert storage.load_token() is None

def test_authenticated_user_is_sent_to_dashboard(controller, storage):
    storage.store_auth({'uid': 'u', 'email': 'a@b.com', 'role': 'student'}, 'token')
    assert controller.resolve_view(View.LOGIN).view is View.DASHBOARD
    assert controller.resolve_view(View.SIGNUP).view is View.DASHBOARD
    state = controller.resolve_view(View.DASHBOARD)
    assert state.view is View.DASHBOARD
    assert state.is_authenticated

def test_unauthenticated_user_stays_on_signup(controller):
    assert controller.resolve_view(View.SIGNUP).view is View.SIGNUP


# --- 로그인 ---

@pytest.mark.parametrize('form, message', [
    ({'email': 'a@b.com', 'password': 'secret1'}, 'Please fill in all fields'),
    ({'email': '   ', 'password': 'secret1', 'role': 'student'}, 'Please fill in all fields'),
    ({'email': 'not-an-email', 'password': 'secret1', 'role': 'student'}, 'Please enter a valid email address'),
])
def test_login_form_validation(controller, identity, form, message):
    state = controller.login(form)
    assert state.error == message
    assert state.view is View.LOGIN
    identity.sign_in.assert_not_called()

def test_login_stores_auth_and_moves_to_dashboard(controller, storage, identity, api, background):
    state = controller.login(LOGIN_FORM)

    identity.sign_in.assert_called_once_with('a@b.com', 'secret1')
    assert state.view is View.DASHBOARD
    assert state.message == 'Login successful! Redirecting...'
    assert storage.load_token() == 'id-token'
    assert storage.load_user() == {
        'uid': 'uid-1', 'email': 'a@b.com', 'displayName': 'a', 'role': 'student', 'emailVerified': False
    }

    # 동기화는 백그라운드 작업으로만 예약됩니다.
    api.sync_user.assert_not_called()
    assert len(background) == 1
    background[0]()
    api.sync_user.assert_called_once_with('id-token', 'a@b.com', None, 'student')

def test_login_sync_failure_does_not_block(controller, api, background):
    api.sync_user.side_effect = ApiError(500, 'User sync failed')
    state = controller.login(LOGIN_FORM)
    background[0]()  # 예외가 밖으로 전파되지 않아야 합니다.
    assert state.view is View.DASHBOARD
    assert state.error is None

def test_login_identity_error_is_shown(controller, storage, identity, background):
    identity.sign_in.side_effect = IdentityError('INVALID_PASSWORD', 'Incorrect password. Please try again.')
    state = controller.login(LOGIN_FORM)
    assert state.view is View.LOGIN
    assert state.error == 'Incorrect password. Please try again.'
    assert storage.load_token() is None
    assert background == []


# --- 회원가입 ---

@pytest.mark.parametrize('override, message', [
    ({'lastName': ''}, 'Please fill in all fields'),
    ({'confirmPassword': 'different'}, 'Passwords do not match'),
    ({'password': '123', 'confirmPassword': '123'}, 'Password must be at least 6 characters long'),
    ({'email': 'a@b'}, 'Please enter a valid email address'),
    ({'email': 'ann@@b.com'}, 'Please enter a valid email address'),
])
def test_signup_form_validation(controller, identity, override, message):
    form = dict(SIGNUP_FORM, **override)
    state = controller.signup(form)
    assert state.error == message
    identity.sign_up.assert_not_called()

def test_signup_sets_display_name_and_creates_backend_user(controller, storage, identity, api, background):
    state = controller.signup(SIGNUP_FORM)

    identity.sign_up.assert_called_once_with('a@b.com', 'secret1')
    identity.update_profile.assert_called_once_with('new-token', 'Ann Lee')
    assert state.view is View.DASHBOARD
    assert state.message == 'Account created successfully! Redirecting...'

    user = storage.load_user()
    assert user['displayName'] == 'Ann Lee'
    assert user['role'] == 'educator'

    background[0]()
    token, payload = api.create_user.call_args[0]
    assert token == 'new-token'
    assert payload['firstName'] == 'Ann'

def test_signup_identity_error_is_shown(controller, identity):
    identity.sign_up.side_effect = IdentityError('EMAIL_EXISTS', 'Email already registered. Please use a different email or login.')
    state = controller.signup(SIGNUP_FORM)
    assert state.error == 'Email already registered. Please use a different email or login.'


# --- 백그라운드 동기화 대기 ---

def test_wait_joins_background_sync(storage, identity, api):
    controller = SessionController(storage, identity, api)
    started = threading.Event()
    release = threading.Event()

    def slow_sync(*args):
        started.set()
        release.wait(5)

    api.sync_user.side_effect = slow_sync
    controller.login(LOGIN_FORM)
    assert started.wait(5)

    assert controller.wait(timeout=0.01) is False
    release.set()
    assert controller.wait(timeout=5) is True
    api.sync_user.assert_called_once_with('id-token', 'a@b.com', None, 'student')

def test_wait_without_pending_work(controller):
    assert controller.wait() is True


# --- 로그아웃 ---

def test_logout_clears_storage(controller, storage):
    controller.login(LOGIN_FORM)
    state = controller.logout()
    assert state.view is View.LOGIN
    assert not state.is_authenticated
    assert storage.load_user() is None
    assert controller.resolve_view(View.DASHBOARD).view is View.LOGIN


def test_from_config_wires_clients(tmp_path, monkeypatch):
    from edugpt.client.config import ClientConfig

    monkeypatch.setattr(ClientConfig, 'BACKEND_URL', 'http://backend:8000/')
    monkeypatch.setattr(ClientConfig, 'FIREBASE_WEB_API_KEY', 'web-key')
    monkeypatch.setattr(ClientConfig, 'STORAGE_PATH', str(tmp_path / 'storage.json'))
    monkeypatch.setattr(ClientConfig, 'REQUEST_TIMEOUT', 7.0)

    controller = SessionController.from_config(ClientConfig)
    assert controller.api.base_url == 'http://backend:8000'
    assert controller.identity.api_key == 'web-key'
    assert controller.identity.timeout == 7.0
    assert controller.storage.path == str(tmp_path / 'storage.json')
