# beer_me_up/models/checkin.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from beer_me_up.models.beer import Beer

@dataclass(frozen=True)
class CheckIn:
    """
    Firestore 'users/{uid}/history' 컬렉션 문서 하나에 대응하는 체크인 기록.
    "사용자가 이 시각에 이 맥주를 마셨다"를 나타냅니다.
    """
    date: datetime
    beer: Beer

@dataclass
class CheckinFetchResponse:
    """체크인 히스토리 한 페이지와 다음 페이지 존재 여부."""
    check_ins: List[CheckIn] = field(default_factory=list)
    has_more: bool = False
