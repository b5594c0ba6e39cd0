# edugpt/api/ai/schemas.py
from marshmallow import Schema, fields, validate, EXCLUDE, INCLUDE

from edugpt.services.tutor_service import DEFAULT_DIFFICULTY

class ChatRequestSchema(Schema):
    """POST /api/ai/chat"""
    class Meta:
        unknown = EXCLUDE

    message = fields.Str(required=True, validate=validate.Length(min=1))
    userId = fields.Str(required=True, validate=validate.Length(min=1))

class QuizRequestSchema(Schema):
    """POST /api/ai/quiz/generate"""
    class Meta:
        unknown = EXCLUDE

    userId = fields.Str(required=True, validate=validate.Length(min=1))
    subject = fields.Str(required=True, validate=validate.Length(min=1))
    difficulty = fields.Str(load_default=DEFAULT_DIFFICULTY)

class AchievementSchema(Schema):
    """date는 '2 days ago' 같은 표시용 문자열도 허용합니다. type 등 추가 키는 그대로 저장됩니다."""
    class Meta:
        unknown = INCLUDE

    title = fields.Str(required=True)
    description = fields.Str(load_default='')
    date = fields.Str(load_default='')
    tier = fields.Str(load_default='')

class WeeklyGoalsSchema(Schema):
    studySessions = fields.Int(validate=validate.Range(min=0))
    studyHours = fields.Float(validate=validate.Range(min=0))
    lessonsCompleted = fields.Int(validate=validate.Range(min=0))

class ProgressDataSchema(Schema):
    """
    progress 문서에 병합할 필드들.
    선언된 필드는 타입/범위를 검사하고, 선언되지 않은 필드는 그대로 병합합니다.
    """
    class Meta:
        unknown = INCLUDE

    progress = fields.Float(validate=validate.Range(min=0, max=100))
    studyStreak = fields.Int(validate=validate.Range(min=0))
    totalStudyTime = fields.Float(validate=validate.Range(min=0))
    completedLessons = fields.Int(validate=validate.Range(min=0))
    achievements = fields.List(fields.Nested(AchievementSchema))
    courses = fields.Dict(keys=fields.Str())
    weeklyGoals = fields.Nested(WeeklyGoalsSchema)
    currentCourse = fields.Str()
    currentChapter = fields.Str()
    chapterProgress = fields.Float(validate=validate.Range(min=0, max=100))

class ProgressUpdateSchema(Schema):
    """POST /api/ai/progress/update"""
    class Meta:
        unknown = EXCLUDE

    userId = fields.Str(required=True, validate=validate.Length(min=1))
    progressData = fields.Nested(ProgressDataSchema, required=True)
