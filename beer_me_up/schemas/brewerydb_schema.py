# beer_me_up/schemas/brewerydb_schema.py
from marshmallow import Schema, fields, EXCLUDE, post_load

from beer_me_up.models.beer import Beer, BeerStyle

# --- 재사용을 위한 중첩 스키마 ---
class CategorySchema(Schema):
    """style.category 항목."""
    class Meta:
        unknown = EXCLUDE

    id = fields.Int(allow_none=True)
    name = fields.Str(allow_none=True)

class StyleSchema(Schema):
    """
    style 항목. abvMin/abvMax는 BreweryDB가 문자열("4.0")로 내려주므로 Raw로 받습니다.
    """
    class Meta:
        unknown = EXCLUDE

    id = fields.Int(allow_none=True)
    name = fields.Str(allow_none=True)
    shortName = fields.Str(allow_none=True)
    description = fields.Str(allow_none=True)
    category = fields.Nested(CategorySchema, allow_none=True)
    abvMin = fields.Raw(allow_none=True)
    abvMax = fields.Raw(allow_none=True)

# --- 검색 응답 스키마 ---

def _to_float(value):
    return float(value) if value is not None else None

def resolve_abv(beer_json: dict):
    """
    ABV 결정 순서:
    1. 맥주 자체의 abv
    2. 스타일의 abvMin, abvMax가 모두 있으면 평균
    3. 둘 중 하나만 있으면 그 값
    4. 그 외에는 None
    """
    if beer_json.get('abv') is not None:
        return _to_float(beer_json['abv'])

    style_data = beer_json.get('style')
    if not style_data:
        return None

    abv_min = _to_float(style_data.get('abvMin'))
    abv_max = _to_float(style_data.get('abvMax'))
    if abv_min is not None and abv_max is not None:
        return (abv_min + abv_max) / 2.0
    if abv_min is not None:
        return abv_min
    return abv_max

def extract_thumbnail_url(beer_json: dict):
    """labels.icon을 썸네일로 사용합니다. labels가 없거나 map이 아니면 None."""
    labels = beer_json.get('labels')
    if not isinstance(labels, dict):
        return None
    icon = labels.get('icon')
    return icon if isinstance(icon, str) else None

class BeerResultSchema(Schema):
    """GET /search?type=beer 응답의 data[] 항목 하나를 Beer로 변환합니다."""
    class Meta:
        unknown = EXCLUDE

    id = fields.Str(allow_none=True)
    name = fields.Str(allow_none=True)
    description = fields.Str(allow_none=True)
    abv = fields.Raw(allow_none=True)
    style = fields.Nested(StyleSchema, allow_none=True)
    labels = fields.Raw(allow_none=True)

    @post_load
    def make_beer(self, data, **kwargs):
        style = BeerStyle.from_dict(data.get('style'))
        return Beer(
            id=data.get('id'),
            name=data.get('name'),
            description=data.get('description'),
            abv=resolve_abv(data),
            thumbnail_url=extract_thumbnail_url(data),
            style=style,
            category=style.category if style else None,
        )

class SearchResponseSchema(Schema):
    """
    검색 응답 최상위. totalResults만 읽습니다.
    data 항목은 totalResults가 0보다 클 때만 BeerResultSchema로 따로 변환합니다.
    """
    class Meta:
        unknown = EXCLUDE

    totalResults = fields.Int(load_default=0, allow_none=True)
