from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthResponse(BaseModel):
    status: str = "ok"


class ToggleAIOptimizationRequest(BaseModel):
    """AI 최적화 on/off 요청"""
    enabled: bool


class ToggleAIOptimizationResponse(BaseModel):
    success: bool = True


class ProAccessResponse(ApiModel):
    """프리미엄 기능 접근 가능 여부"""
    can_access: bool
    ai_enabled: bool


class SuggestionResponse(BaseModel):
    title: str
    description: str
    impact: int


class SystemAnalysisResponse(ApiModel):
    """규칙 기반 시스템 분석 결과"""
    performance_score: int = Field(ge=0, le=100)
    suggestions: List[SuggestionResponse] = Field(default_factory=list)
