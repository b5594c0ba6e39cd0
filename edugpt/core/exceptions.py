# edugpt/core/exceptions.py
"""서비스 계층에서 발생시키고 라우트 계층에서 HTTP 응답으로 변환하는 도메인 예외들."""


class UserNotFoundError(Exception):
    """참조한 사용자 문서가 Firestore에 존재하지 않을 때 발생합니다."""

    def __init__(self, user_id: str):
        super().__init__(f"User not found: {user_id}")
        self.user_id = user_id


class ProfileCreationError(Exception):
    """Firebase Auth 계정 생성 후 프로필 문서 저장에 실패했을 때 발생합니다.

    rolled_back 은 보상 작업(Auth 계정 삭제)이 성공했는지를 나타냅니다.
    """

    def __init__(self, uid: str, rolled_back: bool):
        super().__init__("Failed to create user profile")
        self.uid = uid
        self.rolled_back = rolled_back


class IdentityError(Exception):
    """Firebase Identity Toolkit 호출이 실패했을 때 발생합니다. message는 사용자에게 그대로 보여줄 문구입니다."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class ApiError(Exception):
    """EduGPT 백엔드가 실패 응답({"success": false, "error": ...})을 반환했거나 연결에 실패했을 때 발생합니다."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
