# edugpt/client/test_tutor_session.py
from unittest.mock import MagicMock

from edugpt.client.storage import ClientStorage
from edugpt.client.tutor import TutorSession
from edugpt.core.exceptions import ApiError
from edugpt.models.chat import ChatRole

CACHED_USER = {
    'uid': 'uid-1', 'email': 'a@b.com', 'displayName': 'Ann Lee', 'firstName': 'Ann', 'role': 'student',
    'interests': ['Physics'], 'educationLevel': 'college'
}


def make_session(user=CACHED_USER, api=None):
    storage = ClientStorage()
    if user:
        storage.store_auth(user, 'token')
    delays = []
    session = TutorSession(storage, api=api, sleep=delays.append, uniform=lambda a, b: (a + b) / 2)
    return session, delays


def test_welcome_uses_cached_profile():
    session, _ = make_session()
    assert [m.role for m in session.messages] == [ChatRole.ASSISTANT]
    assert session.messages[0].content.startswith("Welcome back, Ann! I see you're interested in Physics. As a college student, ")

def test_default_welcome_without_profile():
    session, _ = make_session(user=None)
    assert session.messages[0].content.startswith("Hello! I'm Alex, your AI tutor.")

def test_send_replies_after_delay():
    session, delays = make_session()
    response = session.send('Can you quiz me on Physics?')

    assert response.startswith("I'd be happy to create a quiz for you about Physics!")
    assert delays == [1.5]
    assert [m.role for m in session.messages] == [ChatRole.ASSISTANT, ChatRole.USER, ChatRole.ASSISTANT]

def test_blank_message_is_ignored():
    session, delays = make_session()
    assert session.send('   ') is None
    assert len(session.messages) == 1
    assert delays == []

def test_start_new_chat_resets_to_welcome():
    session, _ = make_session()
    session.send('hello')
    session.start_new_chat()
    assert len(session.messages) == 1

def test_quick_action_prompts():
    session, _ = make_session()
    assert session.quick_action('Quiz Me') == "Give me a quiz on one of my subjects to test my understanding!"
    assert session.quick_action('Unknown') == ''

def test_backend_reply_is_used_when_available():
    api = MagicMock()
    api.send_chat_message.return_value = {'success': True, 'response': 'from backend'}
    session, delays = make_session(api=api)

    assert session.send('hello') == 'from backend'
    api.send_chat_message.assert_called_once_with('uid-1', 'hello')
    assert delays == []

def test_backend_failure_falls_back_to_local_reply():
    api = MagicMock()
    api.send_chat_message.side_effect = ApiError(404, 'User not found')
    session, delays = make_session(api=api)

    response = session.send('hello')
    assert response.startswith('Hello Ann!')
    assert '"hello"' in response
    assert delays == [1.5]
