# edugpt/models/chat.py
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any

from edugpt.utils.datetime_utils import DateTimeUtils

class ChatRole(Enum):
    USER = "user"
    ASSISTANT = "assistant"

@dataclass
class ChatMessage:
    """
    'chats' 문서의 messages 배열 원소.
    ArrayUnion은 완전히 같은 값을 하나로 합치기 때문에 메시지마다 고유 id를 둡니다.
    """
    role: ChatRole
    content: str
    timestamp: str = field(default_factory=DateTimeUtils.now_iso)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChatMessage":
        try:
            role = ChatRole(data.get('role'))
        except ValueError:
            role = ChatRole.ASSISTANT
        timestamp = data.get('timestamp') or ''
        if isinstance(timestamp, datetime):
            timestamp = DateTimeUtils.to_iso_string(timestamp)
        elif timestamp and not timestamp.endswith('Z'):
            # 오프셋이 붙은 문자열은 UTC 'Z' 포맷으로 맞춥니다. 해석할 수 없으면 저장된 값 그대로.
            try:
                timestamp = DateTimeUtils.to_iso_string(DateTimeUtils.parse_iso_datetime(timestamp))
            except ValueError:
                pass
        return cls(
            role=role,
            content=data.get('content') or '',
            timestamp=timestamp,
            id=data.get('id') or ''
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'role': self.role.value,
            'content': self.content,
            'timestamp': self.timestamp
        }

@dataclass
class ChatHistory:
    """Firestore 'chats' 컬렉션의 문서 구조 (문서 ID = uid). 메시지는 삽입 순서를 유지하며 개별 삭제는 없습니다."""
    messages: List[ChatMessage] = field(default_factory=list)
    last_updated: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ChatHistory":
        data = data or {}
        return cls(
            messages=[ChatMessage.from_dict(m) for m in data.get('messages') or []],
            last_updated=data.get('lastUpdated')
        )
