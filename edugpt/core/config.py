# edugpt/core/config.py

import os # 환경 변수를 읽기 위해 사용합니다.

DEFAULT_CORS_ORIGINS = 'http://127.0.0.1:5501,http://localhost:5501,http://localhost:3000'


def _split_origins(raw: str) -> list:
    return [origin.strip() for origin in raw.split(',') if origin.strip()]


class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # Firebase 프로젝트 ID. 서비스 계정 파일에 포함되어 있지만 명시적으로 지정할 수도 있습니다.
    FIREBASE_PROJECT_ID = os.getenv('FIREBASE_PROJECT_ID')

    # 프론트엔드 개발 서버 주소 목록. 이 목록에 있는 Origin만 자격 증명(쿠키, Authorization 헤더)을 포함한 요청이 허용됩니다.
    CORS_ORIGINS = _split_origins(os.getenv('CORS_ORIGINS', DEFAULT_CORS_ORIGINS))

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # 대시보드에 노출되는 최근 업적의 최대 개수
    DASHBOARD_ACHIEVEMENT_LIMIT = 4

class DevelopmentConfig(Config):
    """개발 환경을 위한 설정 클래스입니다."""
    DEBUG = True
    # 개발용 Firebase 프로젝트에 연결하기 위한 서비스 계정 키 파일 경로
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH')

class TestingConfig(Config):
    """테스트 환경을 위한 설정 클래스입니다."""
    # TESTING = True 이면 Firebase Admin SDK를 초기화하지 않습니다. 외부 서비스는 테스트 더블로 대체됩니다.
    TESTING = True
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')

class ProductionConfig(Config):
    """운영 환경을 위한 설정 클래스입니다."""
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('PROD_FIREBASE_CREDENTIALS_PATH')

# FLASK_ENV 값에 따라 create_app 함수에서 적절한 설정 클래스를 선택하는 데 사용됩니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
