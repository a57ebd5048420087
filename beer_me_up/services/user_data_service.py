# beer_me_up/services/user_data_service.py
import logging
from typing import Optional, List

from firebase_admin import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from beer_me_up.core.exceptions import DatabaseNotInitializedError, UserDocumentCreationError
from beer_me_up.models.beer import Beer
from beer_me_up.models.checkin import CheckIn, CheckinFetchResponse
from beer_me_up.services.brewerydb_service import BreweryDBService
from beer_me_up.services.checkin_stream import CheckinStream
from beer_me_up.services.document_mapper import (
    checkin_from_document,
    checkin_to_document,
)
from beer_me_up.utils.datetime_utils import DateTimeUtils

logger = logging.getLogger(__name__)

# 체크인 히스토리 한 페이지의 크기
HISTORY_PAGE_SIZE = 20


class UserDataService:
    """
    사용자별 체크인 데이터에 대한 모든 Firestore 접근을 담당하는 서비스 클래스.

    상태는 두 가지뿐입니다: 초기화 전(Uninitialized)과 준비 완료(Ready).
    init_db()가 성공하면 Ready로 전환되며 되돌아가지 않습니다.

    문서 구조:
        users/{uid}
        users/{uid}/history/{auto_id}
        users/{uid}/beers/{beer_id}
        users/{uid}/beers/{beer_id}/history/{auto_id}
    """

    def __init__(self, brewerydb_service: BreweryDBService, db=None):
        self.db = db or firestore.client()
        self.users_ref = self.db.collection('users')
        self.brewerydb_service = brewerydb_service
        self._user_doc = None

    @property
    def is_initialized(self) -> bool:
        return self._user_doc is not None

    def init_db(self, user) -> None:
        """
        인증된 사용자의 루트 문서를 조회하고, 없으면 생성합니다.

        :param user: uid 속성을 가진 사용자 객체 (예: firebase_admin.auth.UserRecord)
        :raises UserDocumentCreationError: 문서 생성 후 다시 읽어올 수 없는 경우
        """
        self._user_doc = self._connect_db(user.uid)

    def _connect_db(self, user_id: str):
        doc_ref = self.users_ref.document(user_id)

        doc = None
        try:
            doc = doc_ref.get()
        except Exception as e:
            logger.error(f"사용자 문서 조회 중 Firestore 오류 (user_id: {user_id}): {e}", exc_info=True)

        if doc is None or not doc.exists:
            logger.info(f"사용자 문서 생성 (user_id: {user_id})")
            doc_ref.set({'id': user_id}, merge=True)

            doc = doc_ref.get()
            if doc is None or not doc.exists:
                logger.error(f"사용자 문서 생성 후 조회 실패 (user_id: {user_id})")
                raise UserDocumentCreationError(user_id)

        return doc

    def _assert_db_initialized(self):
        if self._user_doc is None:
            raise DatabaseNotInitializedError()

    @property
    def _history_ref(self):
        return self._user_doc.reference.collection('history')

    @property
    def _beers_ref(self):
        return self._user_doc.reference.collection('beers')

    def fetch_checkin_history(self, start_after: Optional[CheckIn] = None) -> CheckinFetchResponse:
        """
        체크인 히스토리를 최신순으로 한 페이지(최대 20개) 조회합니다.

        :param start_after: 이전 페이지의 마지막 체크인. 주어지면 그 날짜 이후(더 과거)부터 조회합니다.
        :return: CheckinFetchResponse. has_more는 페이지가 가득 찼는지로만 판단합니다.
        """
        self._assert_db_initialized()

        query = (
            self._history_ref
            .order_by('date', direction=firestore.Query.DESCENDING)
            .limit(HISTORY_PAGE_SIZE)
        )
        if start_after is not None:
            query = query.start_after({'date': DateTimeUtils.for_firestore(start_after.date)})

        docs = list(query.stream())
        if not docs:
            return CheckinFetchResponse([], False)

        check_ins = [checkin_from_document(doc) for doc in docs]
        # 남은 문서가 정확히 0개여도 페이지가 가득 차면 True (알려진 한계)
        return CheckinFetchResponse(check_ins, len(check_ins) >= HISTORY_PAGE_SIZE)

    def listen_for_checkin(self, poll_interval: float = 1.0) -> CheckinStream:
        """
        구독 시점 이후 'history'에 추가되는 체크인을 실시간으로 내보내는 스트림을 반환합니다.
        수정/삭제 변경은 무시합니다. 사용이 끝나면 close()를 호출해야 합니다.
        """
        self._assert_db_initialized()

        query = self._history_ref.where(filter=FieldFilter('date', '>', DateTimeUtils.now()))
        return CheckinStream(query, checkin_from_document, poll_interval=poll_interval)

    def save_beer_check_in(self, beer: Beer) -> None:
        """
        맥주 체크인을 저장합니다. 트랜잭션 없이 순서대로 세 번 기록합니다.

        1. 전체 히스토리('history')에 체크인 추가
        2. 맥주별 요약 문서('beers/{beer_id}')를 merge로 갱신 (last_checkin 포함)
        3. 맥주별 히스토리('beers/{beer_id}/history')에 시각만 추가

        뒤 단계가 실패해도 앞 단계는 되돌리지 않으며, 실패한 단계의 예외를 그대로 전달합니다.
        """
        self._assert_db_initialized()

        checkin_time = DateTimeUtils.now()
        try:
            self._history_ref.add(checkin_to_document(beer, checkin_time))

            beer_ref = self._beers_ref.document(beer.id)
            summary = checkin_to_document(beer, checkin_time)
            summary.pop('date')
            summary['last_checkin'] = checkin_time
            beer_ref.set(summary, merge=True)

            beer_ref.collection('history').add({'date': checkin_time})

            logger.info(f"체크인 저장 완료 (beer_id: {beer.id})")
        except Exception as e:
            logger.error(f"체크인 저장 실패 (beer_id: {beer.id}): {e}", exc_info=True)
            raise

    def find_beers_matching(self, pattern: str) -> List[Beer]:
        """BreweryDB에서 검색어와 일치하는 맥주를 찾습니다."""
        return self.brewerydb_service.search_beers(pattern)
