# edugpt/services/tutor_service.py
"""
스크립트 기반 AI 튜터 응답 생성기.

언어 모델을 호출하지 않고, 입력 메시지의 키워드와 사용자 프로필(관심사, 학력, 학습 목표)로
고정된 템플릿을 채워 응답을 만듭니다. 백엔드 /api/ai/chat 과 클라이언트 TutorSession 이 함께 사용합니다.
"""
import copy
from typing import Optional, Dict, Any

from edugpt.models.user import User

GENERIC_QUIZ_SUBJECT = "general knowledge"
DEFAULT_QUIZ_SUBJECT = "mathematics"
DEFAULT_DIFFICULTY = "beginner"

# 빠른 실행 버튼이 입력창에 채워 넣는 문구
QUICK_ACTION_PROMPTS = {
    "Summarize": "Can you summarize a key topic from my interests in simple terms?",
    "Explain": "Please explain an important concept from my courses in detail:",
    "Quiz Me": "Give me a quiz on one of my subjects to test my understanding!",
}

QUIZ_TEMPLATES = {
    "mathematics": {
        "title": "Mathematics Quiz - {difficulty}",
        "questions": [
            {
                "question": "Solve for x: 2x + 5 = 13",
                "options": ["x = 4", "x = 5", "x = 6", "x = 7"],
                "correctAnswer": 0,
                "explanation": "Subtract 5 from both sides: 2x = 8, then divide by 2: x = 4"
            },
            {
                "question": "What is the area of a circle with radius 4?",
                "options": ["16π", "8π", "12π", "4π"],
                "correctAnswer": 0,
                "explanation": "Area = πr² = π(4)² = 16π"
            }
        ]
    },
    "physics": {
        "title": "Physics Quiz - {difficulty}",
        "questions": [
            {
                "question": "What is Newton's First Law of Motion?",
                "options": [
                    "An object at rest stays at rest",
                    "F = ma",
                    "For every action there is an equal reaction",
                    "Energy cannot be created or destroyed"
                ],
                "correctAnswer": 0,
                "explanation": "Newton's First Law states that an object at rest stays at rest unless acted upon by a force."
            }
        ]
    }
}


def build_personalized_context(user: Optional[User]) -> str:
    """관심사 → 학력 → 학습 목표 순서로 개인화 문구를 이어 붙입니다. 해당 값이 없으면 빈 문자열."""
    if user is None:
        return ''

    profile = user.profile
    context = ''
    if profile.interests:
        context += f" The user is interested in {', '.join(profile.interests)}."
    if profile.education_level:
        context += f" They are at {profile.education_level} level."
    if profile.learning_goals:
        context += f" Their learning goal is: {profile.learning_goals}."
    return context


def generate_response(message: str, user: Optional[User]) -> str:
    """
    입력 메시지를 소문자로 바꾼 뒤 아래 순서대로 키워드를 검사해 첫 번째로 일치하는 템플릿을 사용합니다.

    1. quiz / test        → 퀴즈 제안 (첫 번째 관심사 또는 general knowledge)
    2. explain / what is  → 개념 설명 제안
    3. summarize / summary → 요약 제안
    4. 그 외               → 이름(없으면 there)으로 인사하고 원문을 그대로 인용
    """
    context = build_personalized_context(user)
    lower_message = message.lower()

    if 'quiz' in lower_message or 'test' in lower_message:
        interests = user.profile.interests if user else []
        subject = interests[0] if interests else GENERIC_QUIZ_SUBJECT
        return f"I'd be happy to create a quiz for you about {subject}!{context} What specific topic would you like to be quizzed on?"

    if 'explain' in lower_message or 'what is' in lower_message:
        return f"I'll explain that concept in simple terms suitable for your level.{context} Let me break it down for you..."

    if 'summarize' in lower_message or 'summary' in lower_message:
        return f"I can help summarize that content for you.{context} Here are the key points..."

    name = (user.greeting_name if user else None) or 'there'
    return f"Hello {name}!{context} Regarding your question \"{message}\", here's what I can tell you based on your learning profile and goals..."


def generate_welcome(user: Optional[User]) -> str:
    """튜터 화면을 열었을 때 보여줄 첫 메시지."""
    if user is None:
        return ("Hello! I'm Alex, your AI tutor. I'm here to help you with any questions about your courses, "
                "homework, or learning concepts. What would you like to know today?")

    profile = user.profile
    message = f"Welcome back, {user.greeting_name or 'there'}! "
    if profile.interests:
        message += f"I see you're interested in {' and '.join(profile.interests)}. "
    if profile.education_level:
        message += f"As a {profile.education_level} student, "
    if profile.learning_goals:
        message += f"I'm here to help you work on your goal of {profile.learning_goals.lower()}. "
    message += ("What would you like to learn today? I can help explain concepts, "
                "create study materials, or quiz you on your subjects!")
    return message


def generate_quiz(subject: str, difficulty: str = DEFAULT_DIFFICULTY) -> Dict[str, Any]:
    """과목명(대소문자 무시)으로 퀴즈 템플릿을 찾습니다. 없는 과목이면 수학 퀴즈를 반환합니다."""
    template = QUIZ_TEMPLATES.get((subject or '').lower(), QUIZ_TEMPLATES[DEFAULT_QUIZ_SUBJECT])
    quiz = copy.deepcopy(template)
    quiz['title'] = quiz['title'].format(difficulty=difficulty)
    return quiz
