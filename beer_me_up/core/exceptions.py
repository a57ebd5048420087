# beer_me_up/core/exceptions.py
from typing import Any, Optional


class BeerMeUpError(Exception):
    """데이터 접근 계층에서 발생하는 모든 예외의 기반 클래스."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class DatabaseNotInitializedError(BeerMeUpError):
    """init_db()가 성공하기 전에 다른 작업을 호출한 경우 (프로그래머 오류)."""

    def __init__(self, message: str = "DB is not initialized"):
        super().__init__(message)


class UserDocumentCreationError(BeerMeUpError):
    """사용자 문서를 생성했지만 다시 읽어올 수 없는 경우."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"Unable to create user document ({user_id})")


class CatalogRequestError(BeerMeUpError):
    """BreweryDB가 2xx 이외의 상태 코드로 응답한 경우."""

    def __init__(self, status_code: int, message: Optional[str] = None):
        self.status_code = status_code
        super().__init__(message or f"Bad response: {status_code}")


class CatalogResponseError(BeerMeUpError):
    """BreweryDB 응답 본문을 해석할 수 없는 경우 (JSON 오류, 스키마 불일치 등)."""

    def __init__(self, message: str = "Malformed catalog response", details: Optional[Any] = None):
        self.details = details
        super().__init__(message)
