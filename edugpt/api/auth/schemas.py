# edugpt/api/auth/schemas.py
from marshmallow import Schema, fields, validate, EXCLUDE

from edugpt.api.users.schemas import ProfileSchema, ROLES

class SyncUserSchema(Schema):
    """클라이언트 SDK 로그인/가입 후 사용자 동기화 요청"""
    class Meta:
        unknown = EXCLUDE

    email = fields.Email(allow_none=True)
    displayName = fields.Str(allow_none=True)
    role = fields.Str(allow_none=True, validate=validate.OneOf(ROLES))

class CreateUserSchema(Schema):
    """
    POST /api/auth/create-user
    클라이언트는 uid, email, emailVerified 등을 함께 보내지만 이 값들은 검증된 토큰에서 가져오므로 무시합니다.
    """
    class Meta:
        unknown = EXCLUDE

    firstName = fields.Str()
    lastName = fields.Str()
    displayName = fields.Str()
    role = fields.Str(validate=validate.OneOf(ROLES))

class RegisterSchema(Schema):
    """서버 측 회원가입 요청"""
    email = fields.Email(required=True)
    password = fields.Str(required=True, load_only=True, validate=validate.Length(min=6))
    displayName = fields.Str()
    role = fields.Str(validate=validate.OneOf(ROLES))
    profile = fields.Nested(ProfileSchema)

class CustomTokenSchema(Schema):
    """커스텀 토큰 발급 요청"""
    uid = fields.Str(required=True, validate=validate.Length(min=1))
    additionalClaims = fields.Dict(keys=fields.Str(), allow_none=True)
