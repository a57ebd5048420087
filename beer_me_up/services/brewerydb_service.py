# beer_me_up/services/brewerydb_service.py

import json
import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urljoin

import requests
from marshmallow import ValidationError

from beer_me_up.core.exceptions import CatalogRequestError, CatalogResponseError
from beer_me_up.models.beer import Beer
from beer_me_up.schemas.brewerydb_schema import BeerResultSchema, SearchResponseSchema

logger = logging.getLogger(__name__)


class BreweryDBService:
    """BreweryDB 맥주 카탈로그 API와의 통신을 담당하는 서비스 클래스입니다."""
    _search_path = "search"

    def __init__(self, base_url: str, api_key: Optional[str] = None, session: Optional[requests.Session] = None):
        self.base_url = base_url if base_url.endswith('/') else base_url + '/'
        self.api_key = api_key
        self.session = session or requests.Session()

    def build_uri(self, path: str, query_parameters: Dict[str, Any]) -> Tuple[str, Dict[str, Any]]:
        """API 경로와 쿼리 파라미터를 만듭니다. API 키가 설정된 경우 'key' 파라미터를 추가합니다."""
        params = dict(query_parameters)
        if self.api_key:
            params['key'] = self.api_key
        return urljoin(self.base_url, path), params

    def search_beers(self, pattern: str) -> List[Beer]:
        """
        자유 텍스트 검색어로 맥주를 검색합니다.

        :param pattern: 검색어 (q 파라미터)
        :return: Beer 목록. 결과가 없으면 빈 리스트
        :raises CatalogRequestError: 응답 상태 코드가 200~299 범위를 벗어난 경우
        :raises CatalogResponseError: 응답 본문을 해석할 수 없는 경우
        """
        url, params = self.build_uri(self._search_path, {'q': pattern, 'type': 'beer'})
        response = self.session.get(url, params=params)

        if response.status_code < 200 or response.status_code > 299:
            logger.error(f"BreweryDB 검색 실패 (q: {pattern}): 상태 코드 {response.status_code}")
            raise CatalogRequestError(response.status_code)

        try:
            data = json.loads(response.content.decode('utf-8'))

            # totalResults가 0이면 data는 건드리지 않습니다.
            total_results = SearchResponseSchema().load(data).get('totalResults') or 0
            if total_results == 0:
                logger.info(f"BreweryDB 검색 결과 없음 (q: {pattern})")
                return []

            beers = BeerResultSchema(many=True).load(data.get('data') or [])
        except (ValidationError, ValueError) as e:
            logger.error(f"BreweryDB 응답 해석 실패 (q: {pattern}): {e}", exc_info=True)
            details = e.messages if isinstance(e, ValidationError) else str(e)
            raise CatalogResponseError(details=details) from e

        logger.info(f"BreweryDB 검색 완료 (q: {pattern}): {len(beers)}개")
        return beers
