# edugpt/api/ai/services.py
import logging
from typing import Dict, Any, List
from firebase_admin import firestore

from edugpt.core.exceptions import UserNotFoundError
from edugpt.models.chat import ChatMessage, ChatHistory, ChatRole
from edugpt.models.progress import Progress
from edugpt.models.user import User
from edugpt.services import firestore_service, tutor_service
from edugpt.services.firestore_service import USERS, PROGRESS, CHATS
from edugpt.utils.datetime_utils import DateTimeUtils

class ProgressService:
    """'progress' 컬렉션(학습 진도) 조회/갱신을 담당하는 서비스 클래스."""

    def __init__(self):
        self.db = firestore.client()
        self.progress_ref = self.db.collection(PROGRESS)
        logging.info("ProgressService initialized.")

    def get_progress(self, user_id: str) -> Progress:
        """
        저장된 진도를 기본 형태 위에 덮어써서 반환합니다.
        문서가 없으면 기본값을 반환하며, 조회만으로 문서를 생성하지 않습니다.
        """
        doc = self.progress_ref.document(user_id).get()
        if not doc.exists:
            return Progress()
        return Progress.from_dict(DateTimeUtils.from_firestore(doc.to_dict()))

    def update_progress(self, user_id: str, progress_data: Dict[str, Any]) -> None:
        """전달된 필드만 병합 쓰기합니다 (마지막 쓰기 우선, 낙관적 동시성 검사 없음)."""
        firestore_service.merge_document(PROGRESS, user_id, progress_data, touch_field='lastUpdated')
        logging.info(f"학습 진도 갱신 (user_id: {user_id}, fields: {sorted(progress_data.keys())})")


class ChatService:
    """스크립트 튜터 대화와 'chats' 컬렉션(대화 기록)을 담당하는 서비스 클래스."""

    def __init__(self):
        self.db = firestore.client()
        self.users_ref = self.db.collection(USERS)
        self.chats_ref = self.db.collection(CHATS)
        logging.info("ChatService initialized.")

    def chat(self, user_id: str, message: str) -> str:
        """
        사용자 프로필로 개인화된 응답을 만들고 대화 기록에 사용자/튜터 메시지 한 쌍을 추가합니다.
        메시지 추가는 ArrayUnion, 세션 수 증가는 Increment로 처리해 동시 요청에서도 갱신이 유실되지 않습니다.
        """
        user_doc = self.users_ref.document(user_id).get()
        if not user_doc.exists:
            raise UserNotFoundError(user_id)

        user = User.from_dict(DateTimeUtils.from_firestore(user_doc.to_dict()), uid=user_id)
        response = tutor_service.generate_response(message, user)

        user_message = ChatMessage(role=ChatRole.USER, content=message)
        assistant_message = ChatMessage(role=ChatRole.ASSISTANT, content=response)
        firestore_service.merge_document(
            CHATS, user_id,
            {'messages': firestore.ArrayUnion([user_message.to_dict(), assistant_message.to_dict()])},
            touch_field='lastUpdated'
        )

        firestore_service.merge_document(
            USERS, user_id,
            {'totalSessions': firestore.Increment(1)},
            touch_field='lastActive'
        )
        return response

    def get_history(self, user_id: str) -> List[ChatMessage]:
        """대화 기록을 삽입 순서대로 반환합니다. 문서가 없으면 빈 목록."""
        doc = self.chats_ref.document(user_id).get()
        if not doc.exists:
            return []
        return ChatHistory.from_dict(doc.to_dict()).messages

    def clear_history(self, user_id: str) -> None:
        """메시지 배열을 빈 배열로 교체합니다. 개별 메시지 삭제 기능은 없습니다."""
        self.chats_ref.document(user_id).set({
            'messages': [],
            'lastUpdated': firestore.SERVER_TIMESTAMP
        })
        logging.info(f"대화 기록 초기화 (user_id: {user_id})")

    def generate_quiz(self, subject: str, difficulty: str) -> Dict[str, Any]:
        return tutor_service.generate_quiz(subject, difficulty)
