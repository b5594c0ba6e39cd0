"""
유틸리티 모듈 패키지

백엔드(Firestore 저장/응답 직렬화)와 클라이언트(토큰 만료 시각)가 함께 사용하는 시간 처리 도구를 포함합니다.
"""

from .datetime_utils import DateTimeUtils

__all__ = ['DateTimeUtils']
