# beer_me_up/core/config.py

import os # 환경 변수를 읽기 위해 사용합니다.

class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # BreweryDB 검색 API 호출 시 'key' 쿼리 파라미터로 전달되는 API 키입니다.
    BREWERYDB_API_KEY = os.getenv('BREWERYDB_API_KEY')
    # BreweryDB API 기본 주소. 경로(search 등)는 이 주소 뒤에 붙습니다.
    BREWERYDB_BASE_URL = os.getenv('BREWERYDB_BASE_URL', 'https://api.brewerydb.com/v2/')

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    DEBUG = False
    TESTING = False

class DevelopmentConfig(Config):
    """개발 환경을 위한 설정 클래스입니다."""
    DEBUG = True
    # 개발용 Firebase 프로젝트의 서비스 계정 키 파일 경로
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH')

class TestingConfig(Config):
    """테스트 환경을 위한 설정 클래스입니다."""
    TESTING = True
    # 테스트용 Firebase 프로젝트의 서비스 계정 키 파일 경로
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')

# 문자열 키와 설정 클래스를 매핑합니다.
# beer_me_up/__init__.py의 create_services 함수에서 BEER_ME_UP_ENV 값에 따라 선택됩니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig
)
