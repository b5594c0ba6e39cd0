# edugpt/client/tutor.py
import logging
import random
import time
from typing import Optional, List, Callable, Tuple

from edugpt.client.api import ApiClient
from edugpt.client.storage import ClientStorage
from edugpt.core.exceptions import ApiError
from edugpt.models.chat import ChatMessage, ChatRole
from edugpt.models.user import User
from edugpt.services import tutor_service

REPLY_DELAY_RANGE = (1.0, 2.0)


class TutorSession:
    """
    클라이언트 측 AI 튜터 화면.

    로컬 저장소에 캐시된 사용자 프로필로 환영 메시지와 응답을 만들며, 응답 전에 1~2초의 지연을 둡니다.
    api가 주어지면 백엔드 /api/ai/chat 으로 보내 대화를 저장하고, 실패하면 로컬 규칙으로 응답합니다.
    """

    def __init__(self, storage: ClientStorage, api: Optional[ApiClient] = None,
                 delay_range: Tuple[float, float] = REPLY_DELAY_RANGE,
                 sleep: Callable[[float], None] = time.sleep,
                 uniform: Callable[[float, float], float] = random.uniform):
        self.storage = storage
        self.api = api
        self.delay_range = delay_range
        self.sleep = sleep
        self.uniform = uniform
        self.user = self._load_user()
        self.messages: List[ChatMessage] = []
        self.start_new_chat()

    def _load_user(self) -> Optional[User]:
        data = self.storage.load_user()
        if not data:
            return None
        return User.from_dict(data, uid=data.get('uid'))

    def start_new_chat(self) -> None:
        """화면의 대화를 비우고 환영 메시지부터 다시 시작합니다. 저장된 대화 기록은 지우지 않습니다."""
        self.messages = [ChatMessage(role=ChatRole.ASSISTANT, content=tutor_service.generate_welcome(self.user))]

    def quick_action(self, action: str) -> str:
        """빠른 실행 버튼(Summarize, Explain, Quiz Me)이 입력창에 채울 문구. 알 수 없는 버튼이면 빈 문자열."""
        return tutor_service.QUICK_ACTION_PROMPTS.get(action, '')

    def send(self, message: str) -> Optional[str]:
        """메시지를 보내고 튜터의 응답을 반환합니다. 공백뿐인 입력은 무시합니다."""
        message = (message or '').strip()
        if not message:
            return None

        self.messages.append(ChatMessage(role=ChatRole.USER, content=message))
        response = self._reply(message)
        self.messages.append(ChatMessage(role=ChatRole.ASSISTANT, content=response))
        return response

    def _reply(self, message: str) -> str:
        if self.api is not None and self.user is not None and self.user.uid:
            try:
                return self.api.send_chat_message(self.user.uid, message)['response']
            except ApiError as e:
                logging.warning(f"백엔드 튜터 호출 실패, 로컬 응답으로 대체합니다: {e.message}")

        # 응답 지연 흉내
        self.sleep(self.uniform(*self.delay_range))
        return tutor_service.generate_response(message, self.user)
