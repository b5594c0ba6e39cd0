# edugpt/client/session.py
"""
로그인/회원가입/대시보드 화면 전환을 담당하는 세션 컨트롤러.

화면 상태는 ViewState 하나에만 있고, SessionController만 이를 변경합니다.
로그인/가입 직후의 백엔드 동기화는 백그라운드에서 실행되며 실패해도 화면 전환을 막지 않습니다.
"""
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any, Callable, List

from marshmallow import Schema, fields, validate, validates_schema, pre_load, ValidationError, EXCLUDE

from edugpt.client.api import ApiClient
from edugpt.client.config import ClientConfig
from edugpt.client.identity import IdentityClient
from edugpt.client.storage import ClientStorage
from edugpt.core.exceptions import IdentityError

FILL_ALL_FIELDS = 'Please fill in all fields'
PASSWORDS_DO_NOT_MATCH = 'Passwords do not match'
PASSWORD_TOO_SHORT = 'Password must be at least 6 characters long'
INVALID_EMAIL = 'Please enter a valid email address'

MIN_PASSWORD_LENGTH = 6
_validate_email = validate.Email(error=INVALID_EMAIL)

_REQUIRED = {'required': FILL_ALL_FIELDS, 'null': FILL_ALL_FIELDS}


class View(Enum):
    LOGIN = "login"
    SIGNUP = "signup"
    DASHBOARD = "dashboard"


@dataclass
class ViewState:
    """현재 화면과 그 화면에 표시할 메시지."""
    view: View = View.LOGIN
    user: Optional[Dict[str, Any]] = None
    token: Optional[str] = None
    error: Optional[str] = None
    message: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user and self.token)


# --- 입력 폼 검증 ---
class _FormSchema(Schema):
    """모든 필드가 비어 있지 않아야 하며, 필드 오류가 있으면 스키마 수준 검사는 건너뜁니다."""
    class Meta:
        unknown = EXCLUDE

    TRIMMED = ()

    @pre_load
    def strip_fields(self, data, **kwargs):
        data = dict(data)
        for key in self.TRIMMED:
            if isinstance(data.get(key), str):
                data[key] = data[key].strip()
        return data

    def first_error(self, form: Dict[str, Any]) -> Optional[str]:
        """검증 오류 중 사용자에게 보여줄 첫 번째 메시지. 오류가 없으면 None."""
        try:
            self.load(form)
        except ValidationError as err:
            schema_errors = err.messages.get('_schema') if isinstance(err.messages, dict) else None
            return schema_errors[0] if schema_errors else FILL_ALL_FIELDS
        return None


def _required_str():
    return fields.Str(required=True, validate=validate.Length(min=1, error=FILL_ALL_FIELDS), error_messages=_REQUIRED)


class LoginFormSchema(_FormSchema):
    TRIMMED = ('email',)

    email = _required_str()
    password = _required_str()
    role = _required_str()

    @validates_schema
    def validate_email(self, data, **kwargs):
        _validate_email(data['email'])


class SignupFormSchema(_FormSchema):
    TRIMMED = ('firstName', 'lastName', 'email')

    firstName = _required_str()
    lastName = _required_str()
    email = _required_str()
    password = _required_str()
    confirmPassword = _required_str()
    role = _required_str()

    @validates_schema
    def validate_credentials(self, data, **kwargs):
        if data['password'] != data['confirmPassword']:
            raise ValidationError(PASSWORDS_DO_NOT_MATCH)
        if len(data['password']) < MIN_PASSWORD_LENGTH:
            raise ValidationError(PASSWORD_TOO_SHORT)
        _validate_email(data['email'])


def _start_daemon_thread(task: Callable[[], None]) -> threading.Thread:
    thread = threading.Thread(target=task)
    thread.daemon = True  # 메인 프로세스 종료 시 함께 종료
    thread.start()
    return thread


class SessionController:
    """ViewState의 유일한 소유자. 모든 화면 전환은 이 클래스의 메서드를 통해서만 일어납니다."""

    def __init__(self, storage: ClientStorage, identity: IdentityClient, api: ApiClient,
                 run_in_background: Callable[[Callable[[], None]], Any] = _start_daemon_thread):
        self.storage = storage
        self.identity = identity
        self.api = api
        self.run_in_background = run_in_background
        self.state = ViewState()
        self._pending: List[threading.Thread] = []

    @classmethod
    def from_config(cls, config=ClientConfig) -> "SessionController":
        return cls(
            storage=ClientStorage(config.STORAGE_PATH),
            identity=IdentityClient(config.FIREBASE_WEB_API_KEY, timeout=config.REQUEST_TIMEOUT),
            api=ApiClient(config.BACKEND_URL, timeout=config.REQUEST_TIMEOUT)
        )

    def start(self, requested: View = View.LOGIN) -> ViewState:
        """페이지를 새로 열 때 호출됩니다. 이전 인증 정보를 지운 뒤 요청한 화면을 결정합니다."""
        self.storage.clear()
        logging.info(f"세션 시작: {requested.value}")
        return self.resolve_view(requested)

    def resolve_view(self, requested: View) -> ViewState:
        """
        저장된 인증 정보에 따라 실제로 보여줄 화면을 결정합니다.
        - 인증된 상태에서 로그인/가입 화면 요청 → 대시보드
        - 인증되지 않은 상태에서 대시보드 요청 → 로그인
        """
        user = self.storage.load_user()
        token = self.storage.load_token()
        authenticated = bool(user and token)

        if authenticated and requested in (View.LOGIN, View.SIGNUP):
            view = View.DASHBOARD
        elif not authenticated and requested == View.DASHBOARD:
            view = View.LOGIN
        else:
            view = requested

        self.state = ViewState(view=view, user=user if authenticated else None, token=token if authenticated else None)
        return self.state

    def login(self, form: Dict[str, Any]) -> ViewState:
        error = LoginFormSchema().first_error(form)
        if error:
            return self._fail(error)

        data = LoginFormSchema().load(form)
        email, role = data['email'], data['role']
        try:
            session = self.identity.sign_in(email, data['password'])
        except IdentityError as e:
            return self._fail(e.message)

        user = {
            'uid': session.uid,
            'email': session.email,
            'displayName': session.display_name or email.split('@')[0],
            'role': role,
            'emailVerified': session.email_verified
        }
        self.storage.store_auth(user, session.id_token)

        self._best_effort('백엔드 사용자 동기화', self.api.sync_user, session.id_token, session.email, session.display_name, role)

        self.state = ViewState(view=View.DASHBOARD, user=user, token=session.id_token, message='Login successful! Redirecting...')
        return self.state

    def signup(self, form: Dict[str, Any]) -> ViewState:
        error = SignupFormSchema().first_error(form)
        if error:
            return self._fail(error)

        data = SignupFormSchema().load(form)
        display_name = f"{data['firstName']} {data['lastName']}"
        try:
            session = self.identity.sign_up(data['email'], data['password'])
            self.identity.update_profile(session.id_token, display_name)
        except IdentityError as e:
            return self._fail(e.message)

        user = {
            'uid': session.uid,
            'email': session.email,
            'displayName': display_name,
            'firstName': data['firstName'],
            'lastName': data['lastName'],
            'role': data['role'],
            'emailVerified': session.email_verified
        }
        self.storage.store_auth(user, session.id_token)

        self._best_effort('백엔드 사용자 생성', self.api.create_user, session.id_token, user)

        self.state = ViewState(view=View.DASHBOARD, user=user, token=session.id_token, message='Account created successfully! Redirecting...')
        return self.state

    def logout(self) -> ViewState:
        """로컬 인증 정보를 모두 지우고 로그인 화면으로 돌아갑니다."""
        self.storage.clear()
        logging.info("로그아웃: 로컬 저장소 초기화")
        self.state = ViewState(view=View.LOGIN)
        return self.state

    def _fail(self, message: str) -> ViewState:
        self.state = ViewState(view=self.state.view, user=self.state.user, token=self.state.token, error=message)
        return self.state

    def _best_effort(self, description: str, func: Callable, *args) -> None:
        def task():
            try:
                func(*args)
                logging.info(f"{description} 성공")
            except Exception as e:
                logging.warning(f"{description} 실패 (로그인은 계속 진행): {e}")

        handle = self.run_in_background(task)
        if isinstance(handle, threading.Thread):
            self._pending.append(handle)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        진행 중인 백그라운드 동기화가 끝날 때까지 기다립니다.
        로그인 직후 종료하는 CLI처럼 동기화 완료가 필요한 호출자를 위한 메서드입니다.
        timeout 안에 모두 끝났으면 True.
        """
        pending, self._pending = self._pending, []
        for thread in pending:
            thread.join(timeout)
        self._pending = [t for t in pending if t.is_alive()]
        return not self._pending
