import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic_settings import BaseSettings

logger = logging.getLogger("config.settings")

BASE_DIR = Path(__file__).resolve().parents[2]  # 프로젝트 루트
dotenv_path = find_dotenv(str(BASE_DIR / ".env"), raise_error_if_not_found=False)
if dotenv_path:
    load_dotenv(dotenv_path)
else:
    logger.debug("프로젝트 루트에서 .env 파일을 찾지 못했습니다. 기본값을 사용합니다.")


class Settings(BaseSettings):
    # API 설정
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 5000

    # Gemini API 설정 (최적화 어드바이저)
    GEMINI_API_KEY: Optional[str] = os.getenv("GEMINI_API_KEY")
    GEMINI_MODEL: str = "gemini-2.5-flash"
    ADVISOR_TEMPERATURE: float = 0.7
    ADVISOR_MAX_TOKENS: int = 1000

    # 로깅 설정
    LOG_LEVEL: str = "INFO"
    ENABLE_FILE_LOG: bool = False
    LOG_FILE_PATH: str = ""
    LOG_MAX_SIZE: int = 10 * 1024 * 1024  # 10MB
    LOG_BACKUP_COUNT: int = 5

    # 서버 타임아웃 설정
    REQUEST_TIMEOUT: int = 60  # 어드바이저 요청 타임아웃 (초)

    # 디바이스 시뮬레이션 설정
    ENABLE_STATS_SIMULATION: bool = True
    STATS_SAMPLING_INTERVAL_SECONDS: int = 30

    # 프리미엄 / 체험판 설정
    TRIAL_PERIOD_DAYS: int = 30
    DEMO_USERNAME: str = "demo"

    class Config:
        env_file = BASE_DIR / ".env"
        extra = "ignore"  # 정의되지 않은 환경 변수 무시


settings = Settings()

if not settings.GEMINI_API_KEY:
    logger.warning("GEMINI_API_KEY가 설정되지 않았습니다. AI 최적화는 기본 최적화로 대체됩니다.")
