# edugpt/services/test_tutor_service.py
from edugpt.models.user import User, UserProfile
from edugpt.services import tutor_service


def make_user(**profile):
    return User(uid='u1', email='a@b.com', profile=UserProfile(**profile))

def test_quiz_request_uses_first_interest():
    user = make_user(interests=['Physics'])
    response = tutor_service.generate_response("Can you quiz me on Physics?", user)
    assert response == (
        "I'd be happy to create a quiz for you about Physics! The user is interested in Physics."
        " What specific topic would you like to be quizzed on?"
    )

def test_quiz_request_without_interests_falls_back():
    response = tutor_service.generate_response("Give me a TEST", make_user())
    assert "about general knowledge!" in response

def test_greeting_echoes_message_verbatim():
    response = tutor_service.generate_response("hello", make_user())
    assert response == (
        "Hello there! Regarding your question \"hello\", "
        "here's what I can tell you based on your learning profile and goals..."
    )

def test_greeting_without_user():
    response = tutor_service.generate_response("Hi!", None)
    assert response.startswith("Hello there!")
    assert '"Hi!"' in response

def test_greeting_uses_first_name_then_display_name():
    user = make_user()
    user.display_name = 'Ada Lovelace'
    assert tutor_service.generate_response("hey", user).startswith("Hello Ada!")
    user.first_name = 'Augusta'
    assert tutor_service.generate_response("hey", user).startswith("Hello Augusta!")

def test_dispatch_order_quiz_before_explain():
    response = tutor_service.generate_response("Explain this and then quiz me", make_user())
    assert response.startswith("I'd be happy to create a quiz")

def test_explain_and_summary_templates():
    user = make_user()
    assert tutor_service.generate_response("What is entropy?", user).startswith("I'll explain that concept")
    assert tutor_service.generate_response("Please summarize chapter 2", user).startswith("I can help summarize")

def test_personalized_context_order():
    user = make_user(interests=['Math', 'Biology'], education_level='high school', learning_goals='ace the exam')
    assert tutor_service.build_personalized_context(user) == (
        " The user is interested in Math, Biology."
        " They are at high school level."
        " Their learning goal is: ace the exam."
    )

def test_welcome_message():
    user = make_user(interests=['Math', 'Biology'], learning_goals='Pass Calculus')
    user.first_name = 'Sam'
    welcome = tutor_service.generate_welcome(user)
    assert welcome.startswith("Welcome back, Sam! I see you're interested in Math and Biology. ")
    assert "your goal of pass calculus." in welcome
    assert tutor_service.generate_welcome(None).startswith("Hello! I'm Alex")

def test_generate_quiz_lookup_and_fallback():
    physics = tutor_service.generate_quiz('Physics', 'advanced')
    assert physics['title'] == 'Physics Quiz - advanced'

    fallback = tutor_service.generate_quiz('Underwater Basket Weaving')
    assert fallback['title'] == 'Mathematics Quiz - beginner'
    assert len(fallback['questions']) == 2

    # 템플릿 원본은 변경되지 않아야 함
    assert tutor_service.QUIZ_TEMPLATES['physics']['title'] == 'Physics Quiz - {difficulty}'
