# edugpt/api/auth/routes.py

import logging
from flask import Blueprint, request, jsonify, current_app, g
from firebase_admin import auth as firebase_auth
from marshmallow import ValidationError

from edugpt.api.auth.schemas import SyncUserSchema, CreateUserSchema, RegisterSchema, CustomTokenSchema
from edugpt.core.exceptions import ProfileCreationError
from edugpt.core.security import firebase_auth_required
from edugpt.utils.datetime_utils import DateTimeUtils

auth_bp = Blueprint('auth_bp', __name__)

@auth_bp.route('/sync-user', methods=['POST'])
@firebase_auth_required
def sync_user():
    """클라이언트 SDK 로그인/가입 직후 사용자 문서를 동기화합니다."""
    auth_service = current_app.services['auth']
    try:
        data = SyncUserSchema().load(request.get_json(silent=True) or {})
        logging.info(f"사용자 동기화 요청: {data.get('email') or g.user.email}")

        user = auth_service.sync_user(
            g.user,
            email=data.get('email'),
            display_name=data.get('displayName'),
            role=data.get('role')
        )
        return jsonify({
            "success": True,
            "message": "User synced successfully",
            "user": DateTimeUtils.for_json(user.to_dict())
        }), 200
    except ValidationError as err:
        return jsonify({"success": False, "error": "Invalid sync request", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"사용자 동기화 중 오류 발생 (uid: {g.user.uid}): {e}", exc_info=True)
        return jsonify({"success": False, "error": "User sync failed"}), 500


@auth_bp.route('/verify', methods=['GET'])
@firebase_auth_required
def verify():
    """토큰을 검증하고 조정된 사용자 정보를 그대로 반환합니다."""
    try:
        logging.info(f"토큰 검증 요청 (uid: {g.user.uid})")
        return jsonify({"success": True, "user": DateTimeUtils.for_json(g.user.to_dict())}), 200
    except Exception as e:
        logging.error(f"토큰 검증 응답 생성 중 오류 발생: {e}", exc_info=True)
        return jsonify({"success": False, "error": "Internal server error"}), 500


@auth_bp.route('/create-user', methods=['POST'])
@firebase_auth_required
def create_user_profile():
    """클라이언트 SDK 가입 직후 이름/역할 정보를 사용자 문서에 저장합니다."""
    auth_service = current_app.services['auth']
    try:
        data = CreateUserSchema().load(request.get_json(silent=True) or {})
        user = auth_service.complete_signup_profile(g.user, data)
        return jsonify({"success": True, "user": DateTimeUtils.for_json(user.to_dict())}), 201
    except ValidationError as err:
        return jsonify({"success": False, "error": "Invalid user data", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"가입 프로필 저장 중 오류 발생 (uid: {g.user.uid}): {e}", exc_info=True)
        return jsonify({"success": False, "error": "Failed to create user profile"}), 500


@auth_bp.route('/register', methods=['POST'])
def register():
    """서버 측에서 Firebase Auth 계정과 프로필 문서를 함께 생성합니다."""
    auth_service = current_app.services['auth']
    try:
        data = RegisterSchema().load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return jsonify({"success": False, "error": "Email and a password of at least 6 characters are required", "details": err.messages}), 400

    try:
        user = auth_service.register_user(
            email=data['email'],
            password=data['password'],
            display_name=data.get('displayName'),
            role=data.get('role'),
            profile=data.get('profile')
        )
        return jsonify({"success": True, "uid": user.uid, "user": DateTimeUtils.for_json(user.to_dict())}), 201
    except firebase_auth.EmailAlreadyExistsError:
        return jsonify({"success": False, "error": "Email already registered"}), 409
    except ProfileCreationError as e:
        logging.error(f"회원가입 프로필 생성 실패 (uid: {e.uid}, rolled_back: {e.rolled_back})")
        return jsonify({"success": False, "error": "Failed to create user profile"}), 500
    except Exception as e:
        logging.error(f"회원가입 처리 중 오류 발생: {e}", exc_info=True)
        return jsonify({"success": False, "error": "Internal server error"}), 500


@auth_bp.route('/create-custom-token', methods=['POST'])
def create_custom_token():
    """클라이언트 로그인용 커스텀 토큰을 발급합니다."""
    auth_service = current_app.services['auth']
    try:
        data = CustomTokenSchema().load(request.get_json(silent=True) or {})
    except ValidationError:
        return jsonify({"success": False, "error": "User ID is required"}), 400

    try:
        custom_token = auth_service.create_custom_token(data['uid'], data.get('additionalClaims'))
        return jsonify({"success": True, "customToken": custom_token}), 200
    except Exception as e:
        logging.error(f"커스텀 토큰 발급 실패 (uid: {data['uid']}): {e}", exc_info=True)
        return jsonify({"success": False, "error": "Failed to create custom token"}), 500
