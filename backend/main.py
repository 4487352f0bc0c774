import sys
from pathlib import Path
from contextlib import asynccontextmanager

# 현재 스크립트의 디렉토리를 Python 경로에 추가 (python backend/main.py 실행용)
current_dir = Path(__file__).parent.absolute()
if str(current_dir) not in sys.path:
    sys.path.insert(0, str(current_dir))

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from api.routes import router
from config.settings import settings
from config.logging_config import setup_logging, get_logger
from core.device_simulator import DeviceSimulator

# 로깅 설정 초기화
setup_logging()
logger = get_logger(__name__)

APP_VERSION = "1.0.0"

# 전역 시뮬레이터 인스턴스
device_simulator = DeviceSimulator()


async def sample_device_stats():
    """주기적으로 시뮬레이션 스냅샷을 기록합니다."""
    try:
        await device_simulator.record_sample()
    except Exception as e:
        logger.error(f"디바이스 스냅샷 기록 중 오류: {e}", exc_info=True)


# -----------------------------------------------------------------------------
# Lifespan 이벤트 핸들러
# -----------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- 애플리케이션 시작 시 실행될 코드 ---
    logger.info("🚀 BoostIQ Pro 백엔드 시작")

    # 스케줄러는 현재 이벤트 루프에 묶이므로 lifespan마다 새로 생성
    scheduler = AsyncIOScheduler()
    app.state.scheduler = scheduler

    if settings.ENABLE_STATS_SIMULATION:
        scheduler.add_job(
            sample_device_stats,
            'interval',
            seconds=settings.STATS_SAMPLING_INTERVAL_SECONDS,
            id='device_stats_sampling_job',
            replace_existing=True
        )
        scheduler.start()
        logger.info(f"📅 디바이스 지표 시뮬레이션 시작됨 ({settings.STATS_SAMPLING_INTERVAL_SECONDS}초 간격)")
    else:
        logger.info("디바이스 지표 시뮬레이션 비활성화됨")

    logger.info("✅ 시스템이 준비되었습니다!")

    yield  # 이 시점에서 애플리케이션이 실행됨

    # --- 애플리케이션 종료 시 실행될 코드 ---
    logger.info("🛑 BoostIQ Pro 백엔드 종료")
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("📅 스케줄러 종료됨")


# -----------------------------------------------------------------------------
# FastAPI 앱 설정
# -----------------------------------------------------------------------------
app = FastAPI(
    title="BoostIQ Pro",
    description="디바이스 성능 대시보드 및 AI 최적화 API",
    version=APP_VERSION,
    lifespan=lifespan
)

# CORS 미들웨어 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API 라우터 등록
app.include_router(router, prefix="/api")


@app.get("/")
async def root():
    """루트 엔드포인트"""
    return {
        "message": "BoostIQ Pro API",
        "version": APP_VERSION,
        "status": "running",
        "docs": "/docs",
    }


# -----------------------------------------------------------------------------
# 서버 실행
# -----------------------------------------------------------------------------
if __name__ == "__main__":
    import uvicorn
    logger.info(f"서버 시작: {settings.API_HOST}:{settings.API_PORT}")
    uvicorn.run(
        "main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=False,
        log_level=settings.LOG_LEVEL.lower(),
    )
