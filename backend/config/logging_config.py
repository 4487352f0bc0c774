import logging
import logging.handlers
from pathlib import Path
from datetime import datetime
from typing import Optional
from config.settings import settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# 설정 레벨과 무관하게 고정하는 외부 라이브러리 로거
THIRD_PARTY_LOG_LEVELS = {
    'httpx': logging.ERROR,
    'httpcore': logging.ERROR,
    'urllib3': logging.ERROR,
    'grpc': logging.ERROR,
    'google.auth': logging.ERROR,
    'apscheduler': logging.WARNING,  # 샘플링마다 INFO가 찍힘
}


def _resolve_log_file() -> Optional[Path]:
    """설정된 로그 파일 경로 (파일 로깅 비활성 시 None)"""
    if not (settings.ENABLE_FILE_LOG and settings.LOG_FILE_PATH):
        return None
    log_path = Path(settings.LOG_FILE_PATH)
    if not log_path.is_absolute():
        log_path = Path.cwd() / log_path
    return log_path.resolve()


def _build_file_handler(log_path: Path, level: int, formatter: logging.Formatter) -> logging.Handler:
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        str(log_path),
        maxBytes=settings.LOG_MAX_SIZE,
        backupCount=settings.LOG_BACKUP_COUNT,
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging():
    """로깅 설정 초기화 (콘솔 + 선택적 로테이팅 파일)"""
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    log_path = _resolve_log_file()
    file_error = None
    if log_path is not None:
        try:
            root_logger.addHandler(_build_file_handler(log_path, level, formatter))
        except OSError as e:
            file_error = e

    for name in ('uvicorn', 'uvicorn.error', 'uvicorn.access', 'fastapi'):
        logging.getLogger(name).setLevel(level)
    for name, fixed_level in THIRD_PARTY_LOG_LEVELS.items():
        logging.getLogger(name).setLevel(fixed_level)

    logger = logging.getLogger(__name__)
    logger.info("=" * 80)
    logger.info("🚀 BoostIQ Pro 로깅 시스템 초기화 완료")
    if log_path is None:
        logger.info("📁 로그 파일: 콘솔 전용 모드")
    elif file_error:
        logger.warning(f"파일 로거를 사용할 수 없어 콘솔 로깅만 활성화되었습니다: {file_error}")
    else:
        logger.info(f"📁 로그 파일: {log_path}")
    logger.info(f"📊 로그 레벨: {settings.LOG_LEVEL}")
    logger.info(f"⏰ 시작 시간: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    logger.info("=" * 80)


def get_logger(name: str) -> logging.Logger:
    """로거 인스턴스 반환"""
    return logging.getLogger(name)
