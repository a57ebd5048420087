# beer_me_up/services/document_mapper.py
"""
Beer/CheckIn 도메인 객체와 Firestore 문서(dict) 사이의 변환을 담당합니다.

저장 형태에서 카테고리는 스타일 하위('style.category')에 위치합니다.
하위 호환을 위해 최상위 'category' 키도 함께 기록하지만, 읽을 때는 스타일 하위만 사용합니다.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from beer_me_up.models.beer import Beer, BeerCategory, BeerStyle, BEER_VERSION
from beer_me_up.models.checkin import CheckIn
from beer_me_up.utils.datetime_utils import DateTimeUtils

logger = logging.getLogger(__name__)


def category_to_value(category: Optional[BeerCategory]) -> Optional[Dict[str, Any]]:
    if category is None:
        return None
    return {
        'id': category.id,
        'name': category.name,
    }


def style_to_value(style: Optional[BeerStyle], category: Optional[BeerCategory] = None) -> Optional[Dict[str, Any]]:
    """
    스타일 map을 만듭니다. 'category'에는 Beer의 카테고리가 우선 기록되고,
    없을 때만 style.category를 사용합니다. 따라서 두 값이 다르면
    다시 읽은 BeerStyle.category는 Beer의 카테고리가 됩니다.
    """
    if style is None:
        return None
    return {
        'id': style.id,
        'name': style.name,
        'shortName': style.short_name,
        'description': style.description,
        'category': category_to_value(category or style.category),
    }


def beer_to_document(beer: Beer) -> Dict[str, Any]:
    """
    Beer를 Firestore에 저장할 수 있는 평탄한 dict로 변환합니다.
    스타일/카테고리가 없으면 키를 생략하지 않고 None을 기록합니다.
    """
    return {
        'id': beer.id,
        'name': beer.name,
        'description': beer.description,
        'abv': beer.abv,
        'thumbnail_url': beer.thumbnail_url,
        'style': style_to_value(beer.style, beer.category),
        'category': category_to_value(beer.category),
    }


def beer_from_document(data: Mapping[str, Any], version: Optional[int] = BEER_VERSION) -> Beer:
    """
    Firestore에 저장된 맥주 스냅샷을 Beer로 복원합니다.

    :param data: 'beer' 필드의 map
    :param version: 스냅샷과 함께 저장된 beer_version (현재는 분기에 사용하지 않음)
    """
    # TODO: beer_version이 2 이상이 되면 버전별 변환 로직을 이곳에 추가
    style = BeerStyle.from_dict(data.get('style'))
    abv = data.get('abv')

    return Beer(
        id=data.get('id'),
        name=data.get('name'),
        description=data.get('description'),
        abv=float(abv) if abv is not None else None,
        thumbnail_url=data.get('thumbnail_url'),
        style=style,
        category=style.category if style else None,
    )


def checkin_to_document(beer: Beer, checkin_date: datetime) -> Dict[str, Any]:
    """'history' 컬렉션에 추가될 체크인 문서를 만듭니다."""
    return {
        'date': DateTimeUtils.for_firestore(checkin_date),
        'beer': beer_to_document(beer),
        'beer_id': beer.id,
        'beer_style_id': beer.style.id if beer.style else None,
        'beer_category_id': beer.category.id if beer.category else None,
        'beer_version': BEER_VERSION,
    }


def checkin_from_document(doc) -> CheckIn:
    """
    'history' 컬렉션의 DocumentSnapshot을 CheckIn으로 변환합니다.
    """
    data = doc.to_dict() or {}

    checkin_date = data.get('date')
    if isinstance(checkin_date, str):
        checkin_date = DateTimeUtils.parse_iso_datetime(checkin_date)
    else:
        checkin_date = DateTimeUtils.from_firestore(checkin_date)

    beer_data = data.get('beer')
    if not isinstance(beer_data, Mapping):
        logger.warning(f"체크인 문서에 beer 스냅샷이 없습니다 (doc_id: {doc.id})")
        raise ValueError(f"체크인 문서 {doc.id}에 beer 필드가 없습니다.")

    return CheckIn(
        date=checkin_date,
        beer=beer_from_document(beer_data, data.get('beer_version')),
    )
