"""
AdvisorClient - Gemini 기반 최적화 어드바이저 클라이언트

현재 시스템 상태(디바이스 지표 + 백그라운드 앱)를 JSON으로 만들어
Gemini에 전달하고, 응답 원문 텍스트를 그대로 돌려줍니다.
응답 해석은 ResponseInterpreter가 담당합니다.
"""

import json
import logging
from typing import Any, Dict, List, Optional

import google.generativeai as genai

from config.settings import settings
from database.models import BackgroundApp, DeviceStats

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """As an AI device optimization expert, analyze the system state and return ONLY a JSON array of optimization strategies. Each strategy should follow this exact format:

[
  {
    "type": "Memory Optimization",
    "description": "Detailed explanation of the issue",
    "impact": 25,
    "priority": "high",
    "actions": ["Specific action 1", "Specific action 2"],
    "requiresPermission": true,
    "isAutomated": false
  }
]

Consider these aspects in your analysis:
1. Resource-heavy apps and their impact
2. Battery optimization opportunities
3. Memory management suggestions
4. System performance improvements
5. Network and temperature optimizations

IMPORTANT: Return ONLY the JSON array with NO additional text or explanations."""


class AdvisorUnavailableError(Exception):
    """어드바이저 호출 실패 (키 없음, 차단, 빈 응답, SDK 오류)"""


def build_system_state(stats: DeviceStats, background_apps: List[BackgroundApp]) -> Dict[str, Any]:
    """어드바이저에 보낼 시스템 상태 페이로드를 구성합니다."""
    return {
        "device": {
            "cpu": stats.cpu_usage,
            "ram": stats.ram_usage,
            "battery": stats.battery_level,
            "storage": stats.storage_usage,
            "network": stats.network_usage,
            "temperature": stats.temperature,
        },
        "backgroundApps": [
            {
                "name": app.name,
                "cpuUsage": app.cpu_usage,
                "ramUsage": app.ram_usage,
                "batteryImpact": app.battery_impact,
                "isSystemApp": app.is_system_app,
                "canBeClosed": app.can_be_closed,
            }
            for app in background_apps
        ],
    }


class AdvisorClient:
    """Gemini 어드바이저 클라이언트"""

    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None):
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.model_name = model_name or settings.GEMINI_MODEL
        self.llm_model = None
        self._init_llm()

    @property
    def llm_available(self) -> bool:
        return self.llm_model is not None

    def _init_llm(self):
        """Gemini LLM 클라이언트 초기화"""
        if not self.api_key:
            logger.warning("GEMINI_API_KEY가 설정되지 않아 AI 최적화를 사용할 수 없습니다.")
            return

        try:
            genai.configure(api_key=self.api_key)
            self.llm_model = genai.GenerativeModel(
                model_name=self.model_name,
                system_instruction=SYSTEM_PROMPT,
                generation_config={
                    "temperature": settings.ADVISOR_TEMPERATURE,
                    "top_p": 1,
                    "max_output_tokens": settings.ADVISOR_MAX_TOKENS,
                },
            )
            logger.info(f"Gemini 어드바이저 초기화 완료 (model={self.model_name})")
        except Exception as e:
            logger.error(f"Gemini 어드바이저 초기화 오류: {e}")
            self.llm_model = None

    async def analyze(self, system_state: Dict[str, Any]) -> str:
        """
        시스템 상태를 어드바이저에 보내고 원문 응답을 반환합니다.

        Raises:
            AdvisorUnavailableError: 호출할 수 없거나 응답이 비어 있는 경우
        """
        if not self.llm_available:
            raise AdvisorUnavailableError("LLM 서비스를 사용할 수 없습니다.")

        prompt = (
            "Analyze this system state and provide optimization recommendations as a JSON array:\n"
            f"{json.dumps(system_state, indent=2)}"
        )
        logger.debug(f"어드바이저 요청 준비 완료: {system_state}")

        try:
            response = await self.llm_model.generate_content_async(
                prompt,
                request_options={"timeout": settings.REQUEST_TIMEOUT},
            )
        except Exception as e:
            raise AdvisorUnavailableError(f"Gemini 호출 실패: {e}") from e

        # prompt_feedback 확인 (안전 필터 차단 여부)
        prompt_feedback = getattr(response, "prompt_feedback", None)
        block_reason = getattr(prompt_feedback, "block_reason", None) if prompt_feedback else None
        if block_reason:
            raise AdvisorUnavailableError(f"Gemini 응답이 차단됨 - block_reason: {block_reason}")

        result_text = self._extract_llm_response_text(response)
        if not result_text:
            raise AdvisorUnavailableError("Gemini 응답이 비어 있습니다.")

        logger.info(f"어드바이저 응답 수신 ({len(result_text)}자)")
        return result_text

    @staticmethod
    def _extract_llm_response_text(response) -> Optional[str]:
        """Gemini 응답에서 텍스트를 안전하게 추출합니다."""
        # response.text는 후보가 없거나 여러 part일 때 ValueError를 던짐
        try:
            text = getattr(response, "text", None)
            if text and text.strip():
                return text.strip()
        except ValueError:
            pass

        candidates = getattr(response, "candidates", None) or []
        if not candidates:
            return None

        content_parts = getattr(getattr(candidates[0], "content", None), "parts", None) or []
        extracted_chunks = [
            part.text for part in content_parts if getattr(part, "text", None)
        ]
        if extracted_chunks:
            return "\n".join(extracted_chunks).strip()
        return None
