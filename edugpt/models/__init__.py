# edugpt/models/__init__.py
from .user import User, UserProfile, AuthProvider, DEFAULT_ROLE
from .progress import Progress, Achievement, WeeklyGoals, DEFAULT_CURRENT_COURSE
from .chat import ChatMessage, ChatHistory, ChatRole

__all__ = [
    'User', 'UserProfile', 'AuthProvider', 'DEFAULT_ROLE',
    'Progress', 'Achievement', 'WeeklyGoals', 'DEFAULT_CURRENT_COURSE',
    'ChatMessage', 'ChatHistory', 'ChatRole'
]
