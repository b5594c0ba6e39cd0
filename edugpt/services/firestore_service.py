# edugpt/services/firestore_service.py
import logging
from typing import Dict, Any
from firebase_admin import firestore

from edugpt.utils.datetime_utils import DateTimeUtils

USERS = 'users'
PROGRESS = 'progress'
CHATS = 'chats'


def create_document(collection_name: str, doc_id: str, data: Dict[str, Any]) -> str:
    """
    지정된 ID로 문서를 새로 생성합니다. createdAt/updatedAt은 서버 시간으로 기록됩니다.

    :param collection_name: 문서를 저장할 컬렉션 이름 (예: 'users')
    :param doc_id: 문서 ID (사용자 문서의 경우 Firebase Auth uid)
    :param data: 저장할 데이터 딕셔너리
    :return: 생성된 문서 ID
    """
    try:
        db = firestore.client()

        document = DateTimeUtils.for_firestore(dict(data))
        document['createdAt'] = firestore.SERVER_TIMESTAMP
        document['updatedAt'] = firestore.SERVER_TIMESTAMP

        db.collection(collection_name).document(doc_id).set(document)

        logging.info(f"Firestore 문서 생성 성공 (Collection: {collection_name}, Doc ID: {doc_id})")
        return doc_id

    except Exception as e:
        logging.error(f"Firestore 문서 생성 실패 (Collection: {collection_name}, Doc ID: {doc_id}): {e}", exc_info=True)
        raise


def merge_document(collection_name: str, doc_id: str, data: Dict[str, Any], touch_field: str = 'updatedAt') -> None:
    """
    지정된 필드만 덮어쓰는 병합 쓰기(set merge=True). 문서가 없으면 생성됩니다.
    touch_field 에 서버 시간을 함께 기록합니다.
    """
    try:
        db = firestore.client()

        document = DateTimeUtils.for_firestore(dict(data))
        document[touch_field] = firestore.SERVER_TIMESTAMP

        db.collection(collection_name).document(doc_id).set(document, merge=True)
        logging.info(f"Firestore 병합 쓰기 성공 (Collection: {collection_name}, Doc ID: {doc_id})")

    except Exception as e:
        logging.error(f"Firestore 병합 쓰기 실패 (Collection: {collection_name}, Doc ID: {doc_id}): {e}", exc_info=True)
        raise
