# edugpt/utils/datetime_utils.py
"""
EduGPT 전체에서 일관된 시간/날짜 처리를 위한 유틸리티 모듈

1. 백엔드의 모든 시간은 UTC timezone-aware datetime으로 다룹니다.
2. Firestore에서 읽은 Timestamp는 응답 직전에 ISO 문자열로 변환합니다.
3. 채팅 메시지의 timestamp처럼 문자열로 저장되는 값은 'Z' 접미사가 붙은 ISO 포맷을 사용합니다.
"""

import logging
from datetime import datetime, date, timezone
from typing import Any
from dateutil import parser as dateutil_parser

logger = logging.getLogger(__name__)


class DateTimeUtils:
    """백엔드와 클라이언트가 함께 쓰는 시간 변환 함수 모음"""

    @staticmethod
    def now() -> datetime:
        """현재 시각 (UTC, tz-aware)"""
        return datetime.now(timezone.utc)

    @staticmethod
    def now_iso() -> str:
        """현재 시간을 ISO 문자열로 반환 (채팅 메시지, API 응답용)"""
        return DateTimeUtils.to_iso_string(DateTimeUtils.now())

    @staticmethod
    def parse_iso_datetime(iso_string: str) -> datetime:
        """
        ISO 포맷 문자열을 UTC datetime 객체로 파싱

        지원 포맷:
        - 2024-01-15T10:30:00Z
        - 2024-01-15T10:30:00+09:00
        - 2024-01-15T10:30:00.123456Z
        - 2024-01-15T10:30:00
        """
        try:
            if not iso_string:
                raise ValueError("빈 문자열은 파싱할 수 없습니다")

            if iso_string.endswith('Z'):
                iso_string = iso_string[:-1] + '+00:00'

            dt = dateutil_parser.isoparse(iso_string)

            # 오프셋이 없는 문자열은 UTC 시각으로 간주
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)

            return dt.astimezone(timezone.utc)

        except Exception as e:
            logger.error(f"ISO datetime 파싱 실패: {iso_string} - {e}")
            raise ValueError(f"Invalid ISO datetime: {iso_string}")

    @staticmethod
    def to_iso_string(dt: datetime) -> str:
        """datetime 객체를 'Z' 접미사가 붙은 ISO 포맷 문자열로 변환"""
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        else:
            dt = dt.astimezone(timezone.utc)
        return dt.isoformat().replace('+00:00', 'Z')

    @staticmethod
    def to_date_string(d: date) -> str:
        """date -> 'YYYY-MM-DD'"""
        return d.strftime('%Y-%m-%d')

    @staticmethod
    def from_timestamp(seconds: float) -> datetime:
        """Unix timestamp(초)를 UTC datetime으로 변환 (ID 토큰의 exp 클레임 등)"""
        if not isinstance(seconds, (int, float)):
            raise ValueError("timestamp는 숫자여야 합니다")
        return datetime.fromtimestamp(seconds, tz=timezone.utc)

    @staticmethod
    def for_firestore(obj: Any) -> Any:
        """
        Firestore 저장을 위해 객체의 날짜/시간 필드를 변환

        변환 규칙:
        - date -> YYYY-MM-DD 문자열 (업적 날짜는 문자열로 저장)
        - timezone-naive datetime -> timezone-aware datetime (UTC)
        - dict/list 내부 재귀적 변환
        - 그 외(Firestore Sentinel, ArrayUnion, Increment 포함)는 그대로 둡니다.
        """
        if isinstance(obj, datetime):
            if obj.tzinfo is None:
                return obj.replace(tzinfo=timezone.utc)
            return obj.astimezone(timezone.utc)
        elif isinstance(obj, date):
            return DateTimeUtils.to_date_string(obj)
        elif isinstance(obj, dict):
            return {k: DateTimeUtils.for_firestore(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [DateTimeUtils.for_firestore(item) for item in obj]
        return obj

    @staticmethod
    def from_firestore(obj: Any) -> Any:
        """
        Firestore에서 읽은 데이터의 Timestamp 필드를 UTC datetime으로 변환

        Firestore의 DatetimeWithNanoseconds는 datetime의 하위 클래스이므로 그대로 정규화됩니다.
        """
        try:
            if isinstance(obj, datetime):
                if obj.tzinfo is None:
                    return obj.replace(tzinfo=timezone.utc)
                return obj.astimezone(timezone.utc)
            elif isinstance(obj, dict):
                return {k: DateTimeUtils.from_firestore(v) for k, v in obj.items()}
            elif isinstance(obj, list):
                return [DateTimeUtils.from_firestore(item) for item in obj]
            return obj
        except Exception as e:
            logger.error(f"Firestore 읽기 변환 실패: {obj} ({type(obj)}) - {e}")
            # 변환할 수 없는 값은 그대로 돌려줍니다
            return obj

    @staticmethod
    def for_json(obj: Any) -> Any:
        """
        API 응답(JSON) 직렬화를 위해 datetime을 ISO 문자열로 변환합니다.
        Flask 기본 JSON 인코더는 datetime을 RFC 822 형식으로 내보내기 때문에 응답 전에 직접 변환합니다.
        """
        if isinstance(obj, datetime):
            return DateTimeUtils.to_iso_string(obj)
        elif isinstance(obj, date):
            return DateTimeUtils.to_date_string(obj)
        elif isinstance(obj, dict):
            return {k: DateTimeUtils.for_json(v) for k, v in obj.items()}
        elif isinstance(obj, (list, tuple)):
            return [DateTimeUtils.for_json(item) for item in obj]
        return obj
