# edugpt/models/user.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any

class AuthProvider(Enum):
    EMAIL = "email"
    GOOGLE = "google"

    @classmethod
    def from_sign_in_provider(cls, sign_in_provider: Optional[str]) -> "AuthProvider":
        """ID 토큰의 firebase.sign_in_provider 클레임 값으로 가입 경로를 판별합니다."""
        return cls.GOOGLE if sign_in_provider == 'google.com' else cls.EMAIL

DEFAULT_ROLE = "student"

@dataclass
class UserProfile:
    """
    'users' 문서의 profile 하위 객체.
    interests는 사용자가 입력한 순서를 유지하며, 중복 제거는 UI의 책임입니다.
    """
    education_level: str = ''
    interests: List[str] = field(default_factory=list)
    learning_goals: str = ''
    bio: str = ''

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]], fallback: Optional[Dict[str, Any]] = None) -> "UserProfile":
        """
        profile 하위 객체로부터 생성합니다.
        초기 버전 문서는 interests 등을 최상위에 저장했기 때문에, profile에 값이 없으면 fallback(문서 최상위)을 사용합니다.
        """
        data = data or {}
        fallback = fallback or {}

        def pick(key):
            value = data.get(key)
            return value if value else fallback.get(key)

        return cls(
            education_level=pick('educationLevel') or '',
            interests=list(pick('interests') or []),
            learning_goals=pick('learningGoals') or '',
            bio=pick('bio') or ''
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'educationLevel': self.education_level,
            'interests': list(self.interests),
            'learningGoals': self.learning_goals,
            'bio': self.bio
        }

@dataclass
class User:
    """
    Firestore 'users' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    문서 ID는 Firebase Auth의 uid와 동일합니다.
    """
    uid: str
    email: str
    display_name: str = ''
    photo_url: str = ''
    auth_provider: AuthProvider = AuthProvider.EMAIL
    role: str = DEFAULT_ROLE
    profile_completed: bool = False
    is_active: bool = True
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile: UserProfile = field(default_factory=UserProfile)
    total_sessions: int = 0
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None
    last_active: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def greeting_name(self) -> Optional[str]:
        """스크립트 튜터가 인사할 때 사용하는 이름. firstName이 없으면 displayName의 첫 단어를 사용합니다."""
        if self.first_name:
            return self.first_name
        if self.display_name:
            return self.display_name.split()[0]
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], uid: Optional[str] = None) -> "User":
        """
        Firestore에서 받은 딕셔너리로부터 User 인스턴스를 생성합니다.
        누락된 필드의 기본값 처리는 이곳에서 한 번만 수행합니다.
        """
        provider = data.get('authProvider')
        try:
            auth_provider = AuthProvider(provider) if provider else AuthProvider.EMAIL
        except ValueError:
            auth_provider = AuthProvider.EMAIL

        return cls(
            uid=data.get('uid') or uid or '',
            email=data.get('email') or '',
            display_name=data.get('displayName') or '',
            photo_url=data.get('photoURL') or '',
            auth_provider=auth_provider,
            # 초기 버전 문서는 역할을 userType 필드에 저장했습니다.
            role=data.get('role') or data.get('userType') or DEFAULT_ROLE,
            profile_completed=bool(data.get('profileCompleted', False)),
            is_active=bool(data.get('isActive', True)),
            first_name=data.get('firstName'),
            last_name=data.get('lastName'),
            profile=UserProfile.from_dict(data.get('profile'), fallback=data),
            total_sessions=int(data.get('totalSessions') or 0),
            created_at=data.get('createdAt'),
            last_login=data.get('lastLogin'),
            last_active=data.get('lastActive'),
            updated_at=data.get('updatedAt')
        )

    def to_dict(self) -> Dict[str, Any]:
        """Firestore 문서 / API 응답 형태(camelCase)로 변환합니다. 값이 없는 선택 필드는 생략합니다."""
        data = {
            'uid': self.uid,
            'email': self.email,
            'displayName': self.display_name,
            'photoURL': self.photo_url,
            'authProvider': self.auth_provider.value,
            'role': self.role,
            'profileCompleted': self.profile_completed,
            'isActive': self.is_active,
            'profile': self.profile.to_dict(),
            'totalSessions': self.total_sessions
        }
        optional = {
            'firstName': self.first_name,
            'lastName': self.last_name,
            'createdAt': self.created_at,
            'lastLogin': self.last_login,
            'lastActive': self.last_active,
            'updatedAt': self.updated_at
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data
