# edugpt/client/identity.py
"""
Firebase Identity Toolkit REST API 클라이언트.

브라우저의 Firebase Client SDK(signInWithEmailAndPassword, createUserWithEmailAndPassword,
updateProfile)가 내부적으로 호출하는 엔드포인트를 requests로 직접 호출합니다.
로그아웃은 서버 호출 없이 로컬 저장소를 비우는 것으로 끝납니다.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Dict, Any

import jwt
import requests

from edugpt.core.exceptions import IdentityError
from edugpt.utils.datetime_utils import DateTimeUtils

IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1"

NETWORK_ERROR = 'NETWORK_REQUEST_FAILED'
NETWORK_ERROR_MESSAGE = 'Network error. Please check your internet connection.'

LOGIN_ERROR_MESSAGES = {
    'EMAIL_NOT_FOUND': 'No account found with this email. Please sign up first.',
    'INVALID_PASSWORD': 'Incorrect password. Please try again.',
    'INVALID_EMAIL': 'Invalid email address format.',
    'USER_DISABLED': 'This account has been disabled.',
    'INVALID_LOGIN_CREDENTIALS': 'Invalid email or password. Please check your credentials.',
    'TOO_MANY_ATTEMPTS_TRY_LATER': 'Too many failed attempts. Please try again later.',
    NETWORK_ERROR: NETWORK_ERROR_MESSAGE,
}
DEFAULT_LOGIN_ERROR = 'Login failed. Please try again.'

SIGNUP_ERROR_MESSAGES = {
    'EMAIL_EXISTS': 'Email already registered. Please use a different email or login.',
    'INVALID_EMAIL': 'Invalid email address format.',
    'WEAK_PASSWORD': 'Password is too weak. Please use a stronger password.',
    'OPERATION_NOT_ALLOWED': 'Email/password accounts are not enabled. Please contact support.',
    NETWORK_ERROR: NETWORK_ERROR_MESSAGE,
}
DEFAULT_SIGNUP_ERROR = 'Signup failed. Please try again.'


@dataclass
class IdentitySession:
    """로그인/가입 성공 시 받은 계정 정보와 ID 토큰."""
    uid: str
    email: str
    id_token: str
    refresh_token: str = ''
    display_name: Optional[str] = None
    email_verified: bool = False
    expires_at: Optional[datetime] = None


def decode_id_token(id_token: str) -> Dict[str, Any]:
    """
    ID 토큰의 클레임을 서명 검증 없이 읽습니다 (만료 시각, user_id 확인용).
    토큰의 진위는 백엔드가 firebase_admin으로 검증합니다.
    """
    try:
        return jwt.decode(id_token, options={"verify_signature": False})
    except jwt.PyJWTError as e:
        logging.warning(f"ID 토큰 디코딩 실패 (무시됨): {e}")
        return {}


class IdentityClient:
    """이메일/비밀번호 계정의 로그인, 가입, 표시 이름 변경을 담당합니다."""

    def __init__(self, api_key: str, timeout: float = 10, session: Optional[requests.Session] = None):
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def sign_in(self, email: str, password: str) -> IdentitySession:
        data = self._post('accounts:signInWithPassword', {
            'email': email,
            'password': password,
            'returnSecureToken': True
        }, LOGIN_ERROR_MESSAGES, DEFAULT_LOGIN_ERROR)
        return self._to_session(data)

    def sign_up(self, email: str, password: str) -> IdentitySession:
        data = self._post('accounts:signUp', {
            'email': email,
            'password': password,
            'returnSecureToken': True
        }, SIGNUP_ERROR_MESSAGES, DEFAULT_SIGNUP_ERROR)
        return self._to_session(data)

    def update_profile(self, id_token: str, display_name: str) -> Dict[str, Any]:
        """계정의 표시 이름을 변경합니다 (가입 직후 'First Last' 설정)."""
        return self._post('accounts:update', {
            'idToken': id_token,
            'displayName': display_name,
            'returnSecureToken': False
        }, SIGNUP_ERROR_MESSAGES, DEFAULT_SIGNUP_ERROR)

    def _post(self, endpoint: str, payload: Dict[str, Any], messages: Dict[str, str], default_message: str) -> Dict[str, Any]:
        url = f"{IDENTITY_TOOLKIT_URL}/{endpoint}"
        try:
            response = self.session.post(url, params={'key': self.api_key}, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logging.error(f"Identity Toolkit 요청 실패 ({endpoint}): {e}")
            raise IdentityError(NETWORK_ERROR, NETWORK_ERROR_MESSAGE) from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if not response.ok:
            # 오류 메시지 형식: "WEAK_PASSWORD : Password should be at least 6 characters"
            raw = ((data.get('error') or {}).get('message') or 'UNKNOWN')
            code = raw.split(' : ')[0].strip()
            logging.warning(f"Identity Toolkit 오류 ({endpoint}): {raw}")
            raise IdentityError(code, messages.get(code, default_message))

        return data

    @staticmethod
    def _to_session(data: Dict[str, Any]) -> IdentitySession:
        id_token = data.get('idToken') or ''
        claims = decode_id_token(id_token) if id_token else {}
        expires_at = DateTimeUtils.from_timestamp(claims['exp']) if isinstance(claims.get('exp'), (int, float)) else None
        return IdentitySession(
            uid=data.get('localId') or claims.get('user_id') or '',
            email=data.get('email') or claims.get('email') or '',
            id_token=id_token,
            refresh_token=data.get('refreshToken') or '',
            display_name=data.get('displayName') or None,
            email_verified=bool(claims.get('email_verified', False)),
            expires_at=expires_at
        )
