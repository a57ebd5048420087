# beer_me_up/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from typing import Any, Dict, Optional

import firebase_admin
from firebase_admin import credentials

from beer_me_up.core.config import config_by_name
from beer_me_up.services.brewerydb_service import BreweryDBService
from beer_me_up.services.user_data_service import UserDataService

def _init_firebase(config) -> None:
    if firebase_admin._apps:
        return
    cred_path = getattr(config, 'FIREBASE_CREDENTIALS_PATH', None)
    if not cred_path or not os.path.exists(cred_path):
        raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
    firebase_admin.initialize_app(credentials.Certificate(cred_path))

def create_services(config_name: Optional[str] = None, db=None, http_session=None) -> Dict[str, Any]:
    """
    데이터 접근 계층의 서비스 팩토리 함수.

    앱 시작 시 한 번 호출해 만든 인스턴스를 필요한 곳에 전달합니다 (전역 싱글턴 없음).
    db를 넘기면 firebase_admin 초기화를 건너뜁니다 (테스트용 가짜 Firestore 등).
    """
    # =====================================================================================
    # 3. 설정 선택
    # =====================================================================================
    config_name = config_name or os.getenv('BEER_ME_UP_ENV', 'development')
    config = config_by_name[config_name]

    # =====================================================================================
    # 4. 로깅
    # =====================================================================================
    if not config.DEBUG:
        logging.basicConfig(
            level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
            format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        )

    # =====================================================================================
    # 5. 외부 서비스 초기화 및 서비스 인스턴스 생성 (의존성 주입)
    # =====================================================================================
    if db is None:
        try:
            _init_firebase(config)
            logging.info("Firebase app initialized successfully")
        except Exception as e:
            logging.error(f"Failed to initialize Firebase app: {e}")
            raise

    services = {}
    services['brewerydb'] = BreweryDBService(
        base_url=config.BREWERYDB_BASE_URL,
        api_key=config.BREWERYDB_API_KEY,
        session=http_session
    )
    services['user_data'] = UserDataService(
        brewerydb_service=services['brewerydb'],
        db=db
    )

    logging.info(f"Services created for '{config_name}' environment.")
    return services
