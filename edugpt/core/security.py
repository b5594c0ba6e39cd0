# edugpt/core/security.py
import logging
from functools import wraps
from flask import request, jsonify, g, current_app
from firebase_admin import auth as firebase_auth

BEARER_PREFIX = "Bearer "

def firebase_auth_required(f):
    """
    Authorization: Bearer <Firebase ID 토큰> 헤더를 검증하는 데코레이터입니다.

    검증에 성공하면 Firestore의 사용자 문서를 조정(없으면 생성, 있으면 lastLogin 갱신)하고
    g.firebase_user 에 디코딩된 클레임을, g.user 에 User 객체를 저장합니다.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        auth_header = request.headers.get("Authorization")
        if not auth_header or not auth_header.startswith(BEARER_PREFIX):
            return jsonify({"success": False, "error": "Access denied. No token provided."}), 401

        token = auth_header[len(BEARER_PREFIX):].strip()
        auth_service = current_app.services['auth']

        try:
            decoded_token = auth_service.verify_token(token)
        # ExpiredIdTokenError는 InvalidIdTokenError의 하위 클래스이므로 먼저 처리합니다.
        except firebase_auth.ExpiredIdTokenError:
            return jsonify({"success": False, "error": "Token expired. Please sign in again."}), 401
        except Exception as e:
            logging.warning(f"Firebase ID 토큰 검증 실패: {e}")
            return jsonify({"success": False, "error": "Invalid authentication token."}), 401

        try:
            g.firebase_user = decoded_token
            g.user = auth_service.resolve_user(decoded_token)
        except Exception as e:
            logging.error(f"사용자 문서 조정 실패 (uid: {decoded_token.get('uid')}): {e}", exc_info=True)
            return jsonify({"success": False, "error": "Internal server error"}), 500

        return f(*args, **kwargs)

    return decorated_function
