# edugpt/api/users/services.py
import logging
from typing import Dict, Any
from firebase_admin import firestore

from edugpt.api.ai.services import ProgressService
from edugpt.core.exceptions import UserNotFoundError
from edugpt.models.progress import DEFAULT_CURRENT_COURSE
from edugpt.models.user import User
from edugpt.services import firestore_service
from edugpt.services.firestore_service import USERS
from edugpt.utils.datetime_utils import DateTimeUtils

class UserService:
    """사용자 프로필과 대시보드 집계를 담당하는 서비스 클래스."""

    def __init__(self, progress_service: ProgressService, achievement_limit: int = 4):
        self.db = firestore.client()
        self.users_ref = self.db.collection(USERS)
        self.progress_service = progress_service
        self.achievement_limit = achievement_limit
        logging.info("UserService initialized.")

    def get_user(self, user_id: str) -> User:
        """사용자 문서를 조회합니다. 없으면 UserNotFoundError."""
        doc = self.users_ref.document(user_id).get()
        if not doc.exists:
            raise UserNotFoundError(user_id)
        return User.from_dict(DateTimeUtils.from_firestore(doc.to_dict()), uid=user_id)

    def update_user(self, user_id: str, update_data: Dict[str, Any]) -> None:
        """프로필 필드를 병합 쓰기합니다. profile 하위 객체도 필드 단위로 병합됩니다."""
        firestore_service.merge_document(USERS, user_id, update_data)
        logging.info(f"사용자 프로필 갱신 (user_id: {user_id}, fields: {sorted(update_data.keys())})")

    def get_dashboard(self, user_id: str) -> Dict[str, Any]:
        """
        사용자 문서와 진도 문서를 각각 읽어 대시보드 데이터를 만듭니다.
        두 읽기는 하나의 트랜잭션으로 묶이지 않습니다.
        """
        user = self.get_user(user_id)
        progress = self.progress_service.get_progress(user_id)

        dashboard = {
            'user': user.to_dict(),
            'progress': progress.progress,
            'studyStreak': progress.study_streak,
            'currentCourse': progress.current_course or DEFAULT_CURRENT_COURSE,
            'achievements': [a.to_dict() for a in progress.recent_achievements(self.achievement_limit)],
            'totalStudyTime': progress.total_study_time,
            'completedLessons': progress.completed_lessons,
            'weeklyGoals': progress.weekly_goals.to_dict()
        }
        if progress.current_chapter is not None:
            dashboard['currentChapter'] = progress.current_chapter
        if progress.chapter_progress is not None:
            dashboard['chapterProgress'] = progress.chapter_progress
        return dashboard
