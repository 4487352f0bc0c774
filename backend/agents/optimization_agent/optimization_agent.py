"""
OptimizationAgent - AI 디바이스 최적화 에이전트

처리 흐름:
1. 현재 시스템 상태(디바이스 지표 + 백그라운드 앱) 구성
2. Gemini 어드바이저에 분석 요청
3. ResponseInterpreter로 응답을 해석해 추천 1건 선택
4. 어드바이저 호출이 실패하면 해석 실패와 동일한 기본 최적화 반환

실제 시스템 조작은 하지 않으며, 자동 적용 가능한 액션은 로그로만 남깁니다.
"""

import logging
from typing import Any, Dict, List, Optional

from ..base_agent import BaseAgent
from .advisor_client import AdvisorClient, AdvisorUnavailableError, build_system_state
from .response_interpreter import ResponseInterpreter, build_fallback_recommendation
from database.models import BackgroundApp, DeviceStats, InsertOptimization, Optimization

logger = logging.getLogger(__name__)


class OptimizationAgent(BaseAgent):
    """디바이스 최적화 추천 에이전트"""

    def __init__(
        self,
        advisor: Optional[AdvisorClient] = None,
        interpreter: Optional[ResponseInterpreter] = None
    ):
        super().__init__(
            agent_type="optimization",
            description="디바이스 상태를 분석하여 가장 효과가 큰 최적화 전략 하나를 추천합니다."
        )
        self.advisor = advisor or AdvisorClient()
        self.interpreter = interpreter or ResponseInterpreter()

    async def optimize(self, stats: DeviceStats, background_apps: List[BackgroundApp]) -> InsertOptimization:
        """
        현재 상태에 대한 최적화 추천을 생성합니다. 예외를 던지지 않습니다.

        Args:
            stats: 최신 디바이스 스냅샷
            background_apps: 실행 중인 백그라운드 앱 목록

        Returns:
            InsertOptimization: 저장 전 추천 (id/timestamp는 저장소가 부여)
        """
        system_state = build_system_state(stats, background_apps)
        logger.info(f"🔍 AI 최적화 분석 시작 (앱 {len(background_apps)}개)")

        try:
            raw_text = await self.advisor.analyze(system_state)
        except AdvisorUnavailableError as e:
            logger.warning(f"어드바이저를 사용할 수 없어 기본 최적화를 사용합니다: {e}")
            return build_fallback_recommendation()

        return self.interpreter.interpret(raw_text)

    def apply_automated_actions(self, optimization: Optimization) -> List[str]:
        """
        권한 없이 자동 적용 가능한 액션을 적용합니다 (시뮬레이션).

        Returns:
            적용된 액션 목록. 자동화 대상이 아니면 빈 리스트
        """
        if not optimization.is_automated or optimization.requires_permission:
            return []

        for action in optimization.actions:
            # 실제 앱이라면 여기서 시스템 API를 호출
            logger.info(f"⚙️ 자동 최적화 적용: {action}")
        return list(optimization.actions)

    async def process(self, state: Dict[str, Any]) -> Dict[str, Any]:
        """state의 stats/background_apps로 최적화를 수행하고 결과를 추가해 반환합니다."""
        stats = state.get("stats")
        if stats is None:
            return {
                **state,
                "success": False,
                "agent_type": self.agent_type,
                "metadata": {"error": "stats가 제공되지 않았습니다."}
            }

        background_apps = state.get("background_apps") or []
        optimization = await self.optimize(stats, background_apps)
        return {
            **state,
            "optimization": optimization,
            "success": True,
            "agent_type": self.agent_type,
            "metadata": {
                "background_app_count": len(background_apps),
                "llm_available": self.advisor.llm_available,
            }
        }


_optimization_agent: Optional[OptimizationAgent] = None


def get_optimization_agent() -> OptimizationAgent:
    """최적화 에이전트 싱글톤 인스턴스 반환 (최초 호출 시 생성)"""
    global _optimization_agent
    if _optimization_agent is None:
        _optimization_agent = OptimizationAgent()
    return _optimization_agent
