# edugpt/client/config.py

import os


class ClientConfig:
    """클라이언트(세션 컨트롤러, 튜터) 설정. 값은 환경 변수(.env)에서 읽습니다."""
    # EduGPT 백엔드 주소
    BACKEND_URL = os.getenv('EDUGPT_BACKEND_URL', 'http://localhost:5000')

    # Firebase 웹 API 키 (Identity Toolkit REST API 호출에 사용)
    FIREBASE_WEB_API_KEY = os.getenv('FIREBASE_WEB_API_KEY')

    # 로컬 저장소 파일 경로. 지정하지 않으면 메모리에만 저장합니다.
    STORAGE_PATH = os.getenv('EDUGPT_STORAGE_PATH')

    REQUEST_TIMEOUT = float(os.getenv('EDUGPT_REQUEST_TIMEOUT', '10'))
