"""
디바이스 대시보드 데이터 모델

저장소에 보관되는 레코드와 삽입용 스키마를 정의합니다.
클라이언트와는 camelCase 키(cpuUsage, isAutomated 등)로 주고받고,
파이썬 코드에서는 snake_case 속성명을 사용합니다.
"""

from datetime import datetime, timedelta
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """camelCase 직렬화를 사용하는 기본 모델"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Device Stats
# =============================================================================

class InsertDeviceStats(CamelModel):
    cpu_usage: int = Field(ge=0, le=100)
    ram_usage: int = Field(ge=0, le=100)
    battery_level: int = Field(ge=0, le=100)
    storage_usage: int = Field(ge=0, le=100)
    network_usage: int = Field(default=0, ge=0, le=100)
    temperature: int = 0


class DeviceStats(InsertDeviceStats):
    id: int
    timestamp: datetime


# =============================================================================
# Background Apps
# =============================================================================

class InsertBackgroundApp(CamelModel):
    name: str = Field(min_length=1)
    cpu_usage: int = Field(ge=0)
    ram_usage: int = Field(ge=0)  # MB
    battery_impact: int = Field(ge=0)
    is_system_app: bool = False
    can_be_closed: bool = True


class BackgroundApp(InsertBackgroundApp):
    id: int
    timestamp: datetime


# =============================================================================
# Optimizations (AI 추천 결과)
# =============================================================================

class InsertOptimization(CamelModel):
    """저장 전 최적화 추천. 어드바이저 응답의 type/impact 키를 그대로 사용합니다."""
    category: str = Field(alias="type")
    description: str
    impact_score: Union[int, float] = Field(alias="impact")
    priority: Any = "medium"
    actions: List[Any] = Field(default_factory=list)
    requires_permission: bool = False
    is_automated: bool = False


class Optimization(InsertOptimization):
    id: int
    timestamp: datetime


# =============================================================================
# Users
# =============================================================================

class InsertUser(CamelModel):
    username: str = Field(min_length=1)
    is_premium: bool = False


class User(InsertUser):
    id: int
    trial_start_date: datetime
    ai_optimization_enabled: bool = False


def is_in_trial_period(user: User, trial_days: int = 30, now: Optional[datetime] = None) -> bool:
    """체험판 기간(trial_start_date + trial_days) 안에 있는지 확인합니다."""
    now = now or datetime.now()
    trial_end_date = user.trial_start_date + timedelta(days=trial_days)
    return trial_end_date > now
