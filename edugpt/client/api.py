# edugpt/client/api.py
import logging
from typing import Optional, Dict, Any, List

import requests

from edugpt.core.exceptions import ApiError


class ApiClient:
    """EduGPT 백엔드 REST API 호출. 실패 응답은 ApiError로 변환됩니다."""

    def __init__(self, base_url: str, timeout: float = 10, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, token: Optional[str] = None, json: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        headers = {'Content-Type': 'application/json'}
        if token:
            headers['Authorization'] = f'Bearer {token}'

        try:
            response = self.session.request(method, f"{self.base_url}/api{path}", json=json, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logging.error(f"API 요청 실패 ({method} {path}): {e}")
            raise ApiError(0, 'Network error. Please check your internet connection.') from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if not response.ok or not data.get('success', False):
            raise ApiError(response.status_code, data.get('error') or 'Request failed')
        return data

    # --- 상태 / 인증 ---
    def health(self) -> Dict[str, Any]:
        return self._request('GET', '/health')

    def sync_user(self, token: str, email: Optional[str], display_name: Optional[str], role: Optional[str]) -> Dict[str, Any]:
        body = {'email': email, 'displayName': display_name, 'role': role}
        return self._request('POST', '/auth/sync-user', token=token, json=body)['user']

    def verify(self, token: str) -> Dict[str, Any]:
        return self._request('GET', '/auth/verify', token=token)['user']

    def create_user(self, token: str, user_data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request('POST', '/auth/create-user', token=token, json=user_data)['user']

    def register(self, email: str, password: str, display_name: Optional[str] = None, role: Optional[str] = None) -> Dict[str, Any]:
        body = {'email': email, 'password': password}
        if display_name:
            body['displayName'] = display_name
        if role:
            body['role'] = role
        return self._request('POST', '/auth/register', json=body)

    def create_custom_token(self, uid: str, additional_claims: Optional[Dict[str, Any]] = None) -> str:
        body = {'uid': uid, 'additionalClaims': additional_claims}
        return self._request('POST', '/auth/create-custom-token', json=body)['customToken']

    # --- 사용자 ---
    def get_user_profile(self, token: str, user_id: str) -> Dict[str, Any]:
        return self._request('GET', f'/users/{user_id}', token=token)['user']

    def update_user_profile(self, token: str, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request('PUT', f'/users/{user_id}', token=token, json=data)

    def get_dashboard(self, token: str, user_id: str) -> Dict[str, Any]:
        return self._request('GET', f'/users/{user_id}/dashboard', token=token)['dashboard']

    # --- AI 튜터 ---
    def send_chat_message(self, user_id: str, message: str) -> Dict[str, Any]:
        return self._request('POST', '/ai/chat', json={'userId': user_id, 'message': message})

    def get_chat_history(self, user_id: str) -> List[Dict[str, Any]]:
        return self._request('GET', f'/ai/chat/history/{user_id}')['messages']

    def clear_chat_history(self, user_id: str) -> Dict[str, Any]:
        return self._request('DELETE', f'/ai/chat/history/{user_id}')

    def generate_quiz(self, user_id: str, subject: str, difficulty: str = 'beginner') -> Dict[str, Any]:
        body = {'userId': user_id, 'subject': subject, 'difficulty': difficulty}
        return self._request('POST', '/ai/quiz/generate', json=body)['quiz']

    # --- 진도 ---
    def update_progress(self, user_id: str, progress_data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request('POST', '/ai/progress/update', json={'userId': user_id, 'progressData': progress_data})

    def get_progress(self, user_id: str) -> Dict[str, Any]:
        return self._request('GET', f'/ai/progress/{user_id}')['progress']
