# edugpt/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from flask import Flask, jsonify
from flask_cors import CORS
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException
import firebase_admin
from firebase_admin import credentials

# - 설정
from edugpt.core.config import config_by_name

# - API 블루프린트
from edugpt.api.health.routes import health_bp
from edugpt.api.auth.routes import auth_bp
from edugpt.api.users.routes import users_bp
from edugpt.api.ai.routes import ai_bp

# - 서비스 모듈
from edugpt.api.auth import services as auth_service_module
from edugpt.api.users.services import UserService
from edugpt.api.ai.services import ChatService, ProgressService

def create_app(config_name=None):
    """
    Flask 애플리케이션 팩토리 함수.
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    # =====================================================================================
    # 4. 확장 기능 및 외부 서비스 초기화
    # =====================================================================================
    CORS(app, origins=app.config['CORS_ORIGINS'], supports_credentials=True)

    # 테스트 환경에서는 Firebase 대신 테스트 더블을 사용합니다.
    if not firebase_admin._apps and not app.config.get('TESTING'):
        cred_path = app.config['FIREBASE_CREDENTIALS_PATH']
        if not cred_path or not os.path.exists(cred_path):
            raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
        cred = credentials.Certificate(cred_path)
        options = {}
        if app.config.get('FIREBASE_PROJECT_ID'):
            options['projectId'] = app.config['FIREBASE_PROJECT_ID']
        firebase_admin.initialize_app(cred, options or None)
        logging.info("Firebase Admin initialized successfully")

    # =====================================================================================
    # 5. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {}

    # - 인증 서비스 (앱 컨텍스트 필요)
    auth_service_module.auth_service.init_app(app)
    app.services['auth'] = auth_service_module.auth_service

    # - 다른 서비스의 기반이 되는 서비스 먼저 생성
    app.services['progress'] = ProgressService()
    app.services['chat'] = ChatService()

    # - 다른 서비스를 주입받아야 하는 도메인 서비스 생성
    app.services['users'] = UserService(
        progress_service=app.services['progress'],
        achievement_limit=app.config['DASHBOARD_ACHIEVEMENT_LIMIT']
    )

    # =====================================================================================
    # 6. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(health_bp, url_prefix='/api')
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(ai_bp, url_prefix='/api/ai')

    # =====================================================================================
    # 7. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"success": False, "error": "Invalid request body", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        # 매칭되지 않는 경로, 허용되지 않은 메서드 등도 동일한 실패 형식으로 응답합니다.
        message = "Route not found" if err.code == 404 else err.name
        return jsonify({"success": False, "error": message}), err.code

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # 다른 핸들러에서 처리되지 않은 모든 예외를 여기서 처리 (내부 오류 내용은 응답에 포함하지 않음)
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        return jsonify({"success": False, "error": "Internal server error"}), 500

    # =====================================================================================
    # 8. 로깅 및 앱 반환
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=app.config['LOG_LEVEL'], format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
