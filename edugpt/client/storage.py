# edugpt/client/storage.py
"""
브라우저 localStorage에 해당하는 클라이언트 로컬 저장소.

인증 정보는 항상 네 개의 키(토큰, 사용자 레코드, 이메일, 역할)가 함께 저장되고 함께 삭제됩니다.
"""
import json
import logging
import os
from typing import Optional, Dict, Any

TOKEN_KEY = 'edugpt_token'
USER_KEY = 'edugpt_user'
EMAIL_KEY = 'edugpt_user_email'
ROLE_KEY = 'edugpt_user_role'

AUTH_KEYS = (TOKEN_KEY, USER_KEY, EMAIL_KEY, ROLE_KEY)


class ClientStorage:
    """문자열 키/값 저장소. path가 주어지면 JSON 파일에 저장하고, 없으면 메모리에만 유지합니다."""

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self._items: Dict[str, str] = self._read()

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value
        self._flush()

    # --- 인증 정보 ---
    def store_auth(self, user: Dict[str, Any], token: str) -> None:
        self._items[TOKEN_KEY] = token
        self._items[USER_KEY] = json.dumps(user, ensure_ascii=False)
        self._items[EMAIL_KEY] = user.get('email') or ''
        self._items[ROLE_KEY] = user.get('role') or ''
        self._flush()
        logging.info(f"인증 정보 저장: {user.get('email')}")

    def load_token(self) -> Optional[str]:
        return self._items.get(TOKEN_KEY)

    def load_user(self) -> Optional[Dict[str, Any]]:
        """저장된 사용자 레코드. 없거나 손상된 경우 None."""
        raw = self._items.get(USER_KEY)
        if not raw:
            return None
        try:
            user = json.loads(raw)
        except ValueError as e:
            logging.error(f"저장된 사용자 정보를 읽을 수 없습니다: {e}")
            return None
        return user if isinstance(user, dict) else None

    def clear(self) -> None:
        """인증 관련 키 네 개를 모두 삭제합니다 (로그아웃, 새로 시작할 때)."""
        for key in AUTH_KEYS:
            self._items.pop(key, None)
        self._flush()

    # --- 파일 입출력 ---
    def _read(self) -> Dict[str, str]:
        if not self.path or not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return {k: v for k, v in data.items() if isinstance(v, str)} if isinstance(data, dict) else {}
        except (OSError, ValueError) as e:
            logging.warning(f"로컬 저장소 파일을 읽지 못해 빈 상태로 시작합니다 ({self.path}): {e}")
            return {}

    def _flush(self) -> None:
        if not self.path:
            return
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(self._items, f, ensure_ascii=False)
