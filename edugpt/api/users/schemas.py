# edugpt/api/users/schemas.py
from marshmallow import Schema, fields, validate, EXCLUDE

ROLES = ('student', 'educator')

class ProfileSchema(Schema):
    """사용자 문서의 profile 하위 객체"""
    educationLevel = fields.Str()
    interests = fields.List(fields.Str(validate=validate.Length(min=1)))
    learningGoals = fields.Str()
    bio = fields.Str()

class UserUpdateSchema(Schema):
    """
    PUT /api/users/{user_id}
    수정 가능한 필드만 허용합니다. uid, email, createdAt 같은 식별/이력 필드는 무시됩니다.
    """
    class Meta:
        unknown = EXCLUDE

    displayName = fields.Str()
    firstName = fields.Str()
    lastName = fields.Str()
    photoURL = fields.Str()
    role = fields.Str(validate=validate.OneOf(ROLES))
    profileCompleted = fields.Bool()
    profile = fields.Nested(ProfileSchema)
