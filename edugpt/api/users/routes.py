# edugpt/api/users/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from marshmallow import ValidationError

from edugpt.api.users.schemas import UserUpdateSchema
from edugpt.core.exceptions import UserNotFoundError
from edugpt.core.security import firebase_auth_required
from edugpt.utils.datetime_utils import DateTimeUtils

users_bp = Blueprint('users_bp', __name__)

@users_bp.route('/<string:user_id>', methods=['GET'])
@firebase_auth_required
def get_user_profile(user_id: str):
    """사용자 프로필을 조회합니다."""
    user_service = current_app.services['users']
    try:
        user = user_service.get_user(user_id)
        return jsonify({"success": True, "user": DateTimeUtils.for_json(user.to_dict())}), 200
    except UserNotFoundError:
        return jsonify({"success": False, "error": "User not found"}), 404
    except Exception as e:
        logging.error(f"사용자 프로필 조회 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error": "Internal server error"}), 500


@users_bp.route('/<string:user_id>', methods=['PUT'])
@firebase_auth_required
def update_user_profile(user_id: str):
    """사용자 프로필을 부분 수정합니다."""
    user_service = current_app.services['users']
    try:
        update_data = UserUpdateSchema().load(request.get_json(silent=True) or {})
        if not update_data:
            return jsonify({"success": False, "error": "No profile fields to update"}), 400

        user_service.update_user(user_id, update_data)
        return jsonify({"success": True, "message": "Profile updated successfully"}), 200
    except ValidationError as err:
        return jsonify({"success": False, "error": "Invalid profile data", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"사용자 프로필 수정 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error": "Internal server error"}), 500


@users_bp.route('/<string:user_id>/dashboard', methods=['GET'])
@firebase_auth_required
def get_dashboard(user_id: str):
    """대시보드 데이터(프로필, 진도, 최근 업적 4개, 연속 학습일)를 조회합니다."""
    user_service = current_app.services['users']
    try:
        dashboard = user_service.get_dashboard(user_id)
        return jsonify({"success": True, "dashboard": DateTimeUtils.for_json(dashboard)}), 200
    except UserNotFoundError:
        return jsonify({"success": False, "error": "User not found"}), 404
    except Exception as e:
        logging.error(f"대시보드 조회 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error": "Internal server error"}), 500
