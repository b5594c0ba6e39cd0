# edugpt/api/auth/services.py
import logging
from typing import Dict, Any, Optional
from firebase_admin import firestore, auth as firebase_auth
from flask import Flask

from edugpt.core.exceptions import ProfileCreationError
from edugpt.models.user import User, UserProfile, AuthProvider, DEFAULT_ROLE
from edugpt.services import firestore_service
from edugpt.services.firestore_service import USERS
from edugpt.utils.datetime_utils import DateTimeUtils

class AuthService:
    """Firebase Auth(ID 토큰 검증, 계정 생성)와 'users' 문서 동기화를 담당하는 서비스 클래스."""

    def __init__(self):
        self.db = None
        self.users_ref = None
        self.app: Optional[Flask] = None

    def init_app(self, app: Flask):
        """앱 초기화 과정에서 호출되어 DB 연결 및 앱 컨텍스트를 설정합니다."""
        self.db = firestore.client()
        self.users_ref = self.db.collection(USERS)
        self.app = app

    # --- 토큰 검증 / 사용자 문서 조정 ---
    def verify_token(self, token: str) -> Dict[str, Any]:
        """ID 토큰을 검증하고 디코딩된 클레임을 반환합니다. 만료 시 ExpiredIdTokenError가 발생합니다."""
        return firebase_auth.verify_id_token(token)

    def resolve_user(self, decoded_token: Dict[str, Any]) -> User:
        """
        검증된 토큰의 uid로 사용자 문서를 조회합니다.
        - 문서가 없으면 토큰 클레임으로 새 문서를 생성합니다.
        - 있으면 lastLogin만 갱신(update)하고, 갱신 이전의 문서를 반환합니다.
        요청마다 읽기 1회, 쓰기 1회만 수행합니다.
        """
        uid = decoded_token['uid']
        user_ref = self.users_ref.document(uid)
        snapshot = user_ref.get()

        if snapshot.exists:
            user = User.from_dict(DateTimeUtils.from_firestore(snapshot.to_dict()), uid=uid)
            user_ref.update({'lastLogin': firestore.SERVER_TIMESTAMP})
            return user

        sign_in_provider = (decoded_token.get('firebase') or {}).get('sign_in_provider')
        now = DateTimeUtils.now()
        user = User(
            uid=uid,
            email=(decoded_token.get('email') or '').lower(),
            display_name=decoded_token.get('name') or '',
            photo_url=decoded_token.get('picture') or '',
            auth_provider=AuthProvider.from_sign_in_provider(sign_in_provider),
            role=DEFAULT_ROLE,
            profile_completed=False,
            created_at=now,
            last_login=now
        )
        document = user.to_dict()
        document['createdAt'] = firestore.SERVER_TIMESTAMP
        document['lastLogin'] = firestore.SERVER_TIMESTAMP
        user_ref.set(document)
        logging.info(f"신규 사용자 문서 생성: {user.email} (uid: {uid})")
        return user

    # --- 클라이언트 로그인/가입 후 동기화 ---
    def sync_user(self, current_user: User, email: Optional[str], display_name: Optional[str], role: Optional[str]) -> User:
        """
        클라이언트 SDK 로그인 직후 호출됩니다. 전달된 필드만 병합 쓰기하므로 기존 필드는 유지됩니다.
        createdAt은 인증 단계에서 문서가 만들어질 때 한 번만 기록되므로 여기서는 쓰지 않습니다.
        """
        update_data = {
            'uid': current_user.uid,
            'email': (email or current_user.email).lower(),
            'displayName': display_name or current_user.display_name,
            'lastLogin': firestore.SERVER_TIMESTAMP
        }
        if role:
            update_data['role'] = role

        firestore_service.merge_document(USERS, current_user.uid, update_data)

        current_user.email = update_data['email']
        current_user.display_name = update_data['displayName']
        current_user.role = role or current_user.role
        current_user.last_login = DateTimeUtils.now()
        current_user.updated_at = current_user.last_login
        return current_user

    def complete_signup_profile(self, current_user: User, profile_data: Dict[str, Any]) -> User:
        """클라이언트 가입 직후 이름/역할 정보를 사용자 문서에 병합합니다."""
        update_data = {k: v for k, v in profile_data.items() if v}
        if 'firstName' in update_data and 'lastName' in update_data and 'displayName' not in update_data:
            update_data['displayName'] = f"{update_data['firstName']} {update_data['lastName']}"

        firestore_service.merge_document(USERS, current_user.uid, update_data)
        merged = current_user.to_dict()
        merged.update(update_data)
        merged['updatedAt'] = DateTimeUtils.now()
        return User.from_dict(merged, uid=current_user.uid)

    # --- 서버 측 계정 생성 (보상 트랜잭션 포함) ---
    def register_user(self, email: str, password: str, display_name: Optional[str] = None,
                      role: Optional[str] = None, profile: Optional[Dict[str, Any]] = None) -> User:
        """
        Firebase Auth 계정을 만든 뒤 'users' 프로필 문서를 생성합니다.
        프로필 문서 생성이 실패하면 고아 계정이 남지 않도록 Auth 계정을 삭제합니다.
        보상 작업 자체가 실패해도 로그만 남기고 ProfileCreationError를 발생시킵니다.
        """
        user_record = firebase_auth.create_user(
            email=email,
            password=password,
            display_name=display_name or None,
            email_verified=False,
            disabled=False
        )
        uid = user_record.uid

        user = User(
            uid=uid,
            email=email.lower(),
            display_name=display_name or '',
            role=role or DEFAULT_ROLE,
            profile_completed=True,
            profile=UserProfile.from_dict(profile)
        )
        try:
            firestore_service.create_document(USERS, uid, user.to_dict())
        except Exception as e:
            rolled_back = self._rollback_identity(uid)
            raise ProfileCreationError(uid, rolled_back) from e

        logging.info(f"서버 측 회원가입 완료: {user.email} (uid: {uid})")
        return user

    def _rollback_identity(self, uid: str) -> bool:
        """프로필 생성 실패 시 Firebase Auth 계정을 삭제합니다. 성공 여부만 반환하고 예외는 전파하지 않습니다."""
        try:
            firebase_auth.delete_user(uid)
            logging.warning(f"프로필 생성 실패로 Firebase Auth 계정을 삭제했습니다 (uid: {uid}).")
            return True
        except Exception as e:
            logging.error(f"보상 작업 실패: Firebase Auth 계정 삭제 불가 (uid: {uid}): {e}", exc_info=True)
            return False

    def create_custom_token(self, uid: str, additional_claims: Optional[Dict[str, Any]] = None) -> str:
        """클라이언트 측 signInWithCustomToken 용 커스텀 토큰을 발급합니다."""
        token = firebase_auth.create_custom_token(uid, additional_claims or None)
        if isinstance(token, bytes):
            token = token.decode('utf-8')
        return token

auth_service = AuthService()
