# beer_me_up/models/beer.py
from dataclasses import dataclass
from typing import Any, Mapping, Optional

# 저장되는 맥주 스냅샷의 스키마 버전. 스냅샷 형태가 바뀌면 증가시킵니다.
BEER_VERSION = 1

@dataclass(frozen=True)
class BeerCategory:
    """BreweryDB 맥주 카테고리 (예: 'British Origin Ales')."""
    id: int
    name: str

@dataclass(frozen=True)
class BeerStyle:
    """
    BreweryDB 맥주 스타일.
    카테고리는 스타일에 속하므로 스타일 쪽에서 역참조로 가집니다.
    """
    id: int
    name: str
    short_name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[BeerCategory] = None

    @classmethod
    def from_dict(cls, style_data: Optional[Mapping[str, Any]]) -> Optional["BeerStyle"]:
        """
        스타일 map으로부터 BeerStyle을 만듭니다. map이 아니면 None.
        카테고리는 스타일 map 안에 'category' map이 있을 때만 생성합니다.
        BreweryDB 응답과 Firestore 스냅샷이 같은 규칙을 공유합니다.
        """
        if not isinstance(style_data, Mapping):
            return None

        category = None
        category_data = style_data.get('category')
        if isinstance(category_data, Mapping):
            category = BeerCategory(
                id=category_data.get('id'),
                name=category_data.get('name'),
            )

        return cls(
            id=style_data.get('id'),
            name=style_data.get('name'),
            short_name=style_data.get('shortName'),
            description=style_data.get('description'),
            category=category,
        )

@dataclass(frozen=True)
class Beer:
    """
    체크인 대상이 되는 맥주. 생성 후 변경되지 않습니다.
    Firestore에는 history/beers 문서의 'beer' 필드로 스냅샷이 저장됩니다.
    """
    id: str
    name: str
    description: Optional[str] = None
    abv: Optional[float] = None
    thumbnail_url: Optional[str] = None
    style: Optional[BeerStyle] = None
    category: Optional[BeerCategory] = None
