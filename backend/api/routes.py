import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from agents.optimization_agent import OptimizationAgent, get_optimization_agent
from config.settings import settings
from core.system_analysis import analyze_device_stats, calculate_overall_performance
from database.memory_storage import MemStorage, get_storage
from database.models import (
    BackgroundApp, DeviceStats, InsertBackgroundApp, InsertDeviceStats, Optimization
)
from .schemas import (
    HealthResponse, ProAccessResponse, SuggestionResponse, SystemAnalysisResponse,
    ToggleAIOptimizationRequest, ToggleAIOptimizationResponse
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """System health check"""
    return HealthResponse(status="ok")


# =============================================================================
# 디바이스 지표
# =============================================================================

@router.get("/device-stats", response_model=DeviceStats)
async def get_device_stats(storage: MemStorage = Depends(get_storage)):
    """최신 디바이스 스냅샷을 조회합니다. 기록이 없으면 기본 스냅샷을 반환합니다."""
    stats = await storage.get_latest_device_stats()
    logger.debug(f"/device-stats 조회: {stats}")
    return stats


@router.post("/device-stats", response_model=DeviceStats)
async def create_device_stats(stats: InsertDeviceStats, storage: MemStorage = Depends(get_storage)):
    """디바이스 스냅샷을 기록합니다."""
    return await storage.insert_device_stats(stats)


@router.get("/device-stats/history", response_model=List[DeviceStats])
async def get_device_stats_history(
    limit: int = Query(default=20, ge=1, le=500),
    storage: MemStorage = Depends(get_storage)
):
    """최근 디바이스 스냅샷 목록을 조회합니다."""
    return await storage.get_device_stats_history(limit)


# =============================================================================
# 백그라운드 앱
# =============================================================================

@router.get("/background-apps", response_model=List[BackgroundApp])
async def get_background_apps(storage: MemStorage = Depends(get_storage)):
    """실행 중인 백그라운드 앱 목록을 조회합니다."""
    apps = await storage.get_background_apps()
    logger.debug(f"/background-apps 조회: {len(apps)}개")
    return apps


@router.post("/background-apps", response_model=BackgroundApp)
async def create_background_app(app: InsertBackgroundApp, storage: MemStorage = Depends(get_storage)):
    """백그라운드 앱을 등록합니다."""
    return await storage.insert_background_app(app)


# =============================================================================
# 최적화
# =============================================================================

@router.get("/optimizations", response_model=List[Optimization])
async def get_optimizations(storage: MemStorage = Depends(get_storage)):
    """최적화 이력을 조회합니다."""
    return await storage.get_optimizations()


@router.post("/optimize", response_model=Optimization)
async def optimize_device(
    storage: MemStorage = Depends(get_storage),
    agent: OptimizationAgent = Depends(get_optimization_agent)
):
    """
    AI 최적화를 실행합니다.

    현재 시스템 상태를 어드바이저에 보내 추천 1건을 받고, 저장한 뒤 반환합니다.
    자동 적용 가능한 추천이면 액션을 적용(시뮬레이션)합니다.
    """
    try:
        stats = await storage.get_latest_device_stats()
        background_apps = await storage.get_background_apps()

        recommendation = await agent.optimize(stats, background_apps)
        optimization = await storage.insert_optimization(recommendation)
        logger.info(f"✅ AI 최적화 완료: {optimization.category} (impact={optimization.impact_score})")

        applied = agent.apply_automated_actions(optimization)
        if applied:
            logger.info(f"자동 최적화 {len(applied)}건 적용됨")

        return optimization
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"최적화 실패: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to optimize device")


@router.get("/system-analysis", response_model=SystemAnalysisResponse)
async def get_system_analysis(storage: MemStorage = Depends(get_storage)):
    """규칙 기반 분석 결과와 종합 성능 점수를 조회합니다."""
    stats = await storage.get_latest_device_stats()
    suggestions = analyze_device_stats(stats)
    return SystemAnalysisResponse(
        performance_score=calculate_overall_performance(stats),
        suggestions=[SuggestionResponse(**suggestion.to_dict()) for suggestion in suggestions],
    )


# =============================================================================
# 프리미엄 / AI 설정
# =============================================================================

@router.get("/pro-access", response_model=ProAccessResponse)
async def get_pro_access(storage: MemStorage = Depends(get_storage)):
    """데모 사용자의 프리미엄 기능 접근 가능 여부를 조회합니다."""
    user = await storage.get_or_create_user(settings.DEMO_USERNAME)
    can_access = await storage.can_access_pro_features(user.id)
    return ProAccessResponse(can_access=can_access, ai_enabled=can_access)


@router.post("/toggle-ai-optimization", response_model=ToggleAIOptimizationResponse)
async def toggle_ai_optimization(
    request_data: ToggleAIOptimizationRequest,
    storage: MemStorage = Depends(get_storage)
):
    """데모 사용자의 AI 최적화 권한을 변경합니다."""
    try:
        user = await storage.get_or_create_user(settings.DEMO_USERNAME)
        await storage.update_user_ai_permissions(user.id, request_data.enabled)
        logger.info(f"AI 최적화 권한 변경: user_id={user.id}, enabled={request_data.enabled}")
        return ToggleAIOptimizationResponse(success=True)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"AI 권한 변경 실패: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update AI permissions")
