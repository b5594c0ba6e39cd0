# edugpt/api/ai/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from marshmallow import ValidationError

from edugpt.api.ai.schemas import ChatRequestSchema, QuizRequestSchema, ProgressUpdateSchema
from edugpt.core.exceptions import UserNotFoundError
from edugpt.utils.datetime_utils import DateTimeUtils

ai_bp = Blueprint('ai_bp', __name__)

@ai_bp.route('/chat', methods=['POST'])
def chat():
    """AI 튜터에게 메시지를 보내고 스크립트 응답을 받습니다."""
    chat_service = current_app.services['chat']
    try:
        data = ChatRequestSchema().load(request.get_json(silent=True) or {})
    except ValidationError:
        return jsonify({"success": False, "error": "Message and userId are required"}), 400

    try:
        response = chat_service.chat(data['userId'], data['message'])
        return jsonify({
            "success": True,
            "response": response,
            "timestamp": DateTimeUtils.now_iso()
        }), 200
    except UserNotFoundError:
        return jsonify({"success": False, "error": "User not found"}), 404
    except Exception as e:
        logging.error(f"AI 채팅 처리 중 오류 발생 (user_id: {data['userId']}): {e}", exc_info=True)
        return jsonify({"success": False, "error": "Internal server error"}), 500


@ai_bp.route('/chat/history/<string:user_id>', methods=['GET'])
def get_chat_history(user_id: str):
    """대화 기록을 조회합니다. 기록이 없으면 빈 배열을 반환합니다."""
    chat_service = current_app.services['chat']
    try:
        messages = chat_service.get_history(user_id)
        return jsonify({"success": True, "messages": [m.to_dict() for m in messages]}), 200
    except Exception as e:
        logging.error(f"대화 기록 조회 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error": "Internal server error"}), 500


@ai_bp.route('/chat/history/<string:user_id>', methods=['DELETE'])
def clear_chat_history(user_id: str):
    """대화 기록을 비웁니다."""
    chat_service = current_app.services['chat']
    try:
        chat_service.clear_history(user_id)
        return jsonify({"success": True, "message": "Chat history cleared successfully"}), 200
    except Exception as e:
        logging.error(f"대화 기록 초기화 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error": "Internal server error"}), 500


@ai_bp.route('/quiz/generate', methods=['POST'])
def generate_quiz():
    """과목별 퀴즈 템플릿을 반환합니다."""
    chat_service = current_app.services['chat']
    try:
        data = QuizRequestSchema().load(request.get_json(silent=True) or {})
    except ValidationError:
        return jsonify({"success": False, "error": "userId and subject are required"}), 400

    try:
        quiz = chat_service.generate_quiz(data['subject'], data['difficulty'])
        return jsonify({"success": True, "quiz": quiz}), 200
    except Exception as e:
        logging.error(f"퀴즈 생성 중 오류 발생: {e}", exc_info=True)
        return jsonify({"success": False, "error": "Internal server error"}), 500


@ai_bp.route('/progress/update', methods=['POST'])
def update_progress():
    """학습 진도를 병합 갱신합니다."""
    progress_service = current_app.services['progress']
    try:
        data = ProgressUpdateSchema().load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return jsonify({"success": False, "error": "userId and valid progressData are required", "details": err.messages}), 400

    try:
        progress_service.update_progress(data['userId'], data['progressData'])
        return jsonify({"success": True, "message": "Progress updated successfully"}), 200
    except Exception as e:
        logging.error(f"진도 갱신 중 오류 발생 (user_id: {data['userId']}): {e}", exc_info=True)
        return jsonify({"success": False, "error": "Internal server error"}), 500


@ai_bp.route('/progress/<string:user_id>', methods=['GET'])
def get_progress(user_id: str):
    """학습 진도를 조회합니다. 문서가 없으면 기본 형태를 반환합니다."""
    progress_service = current_app.services['progress']
    try:
        progress = progress_service.get_progress(user_id)
        return jsonify({"success": True, "progress": DateTimeUtils.for_json(progress.to_dict())}), 200
    except Exception as e:
        logging.error(f"진도 조회 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error": "Internal server error"}), 500
