# edugpt/api/health/routes.py
from flask import Blueprint, jsonify

from edugpt.utils.datetime_utils import DateTimeUtils

health_bp = Blueprint('health_bp', __name__)

@health_bp.route('/health', methods=['GET'])
def health():
    """인증 없이 호출 가능한 상태 확인 엔드포인트입니다."""
    return jsonify({
        "success": True,
        "message": "EduGPT Backend is running!",
        "timestamp": DateTimeUtils.now_iso(),
        "database": "Firebase Firestore",
        "auth": "Firebase Authentication",
        "features": ["Authentication", "AI Tutor", "User Management", "Progress Tracking"]
    }), 200
