"""
인메모리 저장소 모듈

- 프로세스 범위의 단일 저장소 (싱글톤)
- 모든 레코드 종류가 하나의 자동 증가 ID 카운터를 공유
- 트랜잭션 보장 없음: 각 연산은 독립적으로 동작
"""
import logging
import threading
from datetime import datetime
from typing import Dict, List, Optional

from config.settings import settings
from .models import (
    BackgroundApp,
    DeviceStats,
    InsertBackgroundApp,
    InsertDeviceStats,
    InsertOptimization,
    InsertUser,
    Optimization,
    User,
    is_in_trial_period,
)

logger = logging.getLogger(__name__)

# 기록된 스냅샷이 없을 때 반환하는 기본값
DEFAULT_DEVICE_STATS = {
    "cpu_usage": 45,
    "ram_usage": 60,
    "battery_level": 85,
    "storage_usage": 70,
    "network_usage": 30,
    "temperature": 38,
}

# 데모용 초기 백그라운드 앱
SEED_BACKGROUND_APPS = [
    InsertBackgroundApp(
        name="Social Media App",
        cpu_usage=15,
        ram_usage=200,
        battery_impact=10,
        is_system_app=False,
        can_be_closed=True,
    ),
    InsertBackgroundApp(
        name="System Services",
        cpu_usage=5,
        ram_usage=150,
        battery_impact=5,
        is_system_app=True,
        can_be_closed=False,
    ),
]


class MemStorage:
    """인메모리 저장소 클래스

    Records:
        - device_stats: 디바이스 스냅샷 (삽입 순서 유지)
        - background_apps: 실행 중인 백그라운드 앱
        - optimizations: AI 최적화 이력
        - users: user_id -> User
    """

    _instance = None
    _lock = threading.Lock()

    def __new__(cls, *args, **kwargs):
        """싱글톤 패턴 구현"""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if getattr(self, "_initialized", False):
            return
        self._id_lock = threading.Lock()
        self.reset()
        self._initialized = True

    def reset(self):
        """저장소를 초기 상태(데모 앱 2개)로 되돌립니다."""
        with self._id_lock:
            self._device_stats: List[DeviceStats] = []
            self._background_apps: List[BackgroundApp] = []
            self._optimizations: List[Optimization] = []
            self._users: Dict[int, User] = {}
            self._current_id = 1

        for app in SEED_BACKGROUND_APPS:
            self._background_apps.append(
                BackgroundApp(**app.model_dump(), id=self._next_id(), timestamp=datetime.now())
            )

    def _next_id(self) -> int:
        """단조 증가하는 ID를 발급합니다."""
        with self._id_lock:
            issued = self._current_id
            self._current_id += 1
            return issued

    # =========================================================================
    # Device Stats
    # =========================================================================

    async def get_latest_device_stats(self) -> DeviceStats:
        if self._device_stats:
            return self._device_stats[-1]
        return DeviceStats(**DEFAULT_DEVICE_STATS, id=0, timestamp=datetime.now())

    async def insert_device_stats(self, stats: InsertDeviceStats) -> DeviceStats:
        new_stats = DeviceStats(**stats.model_dump(), id=self._next_id(), timestamp=datetime.now())
        self._device_stats.append(new_stats)
        return new_stats

    async def get_device_stats_history(self, limit: int = 20) -> List[DeviceStats]:
        """최근 스냅샷을 오래된 순서로 반환합니다."""
        if limit <= 0:
            return []
        return list(self._device_stats[-limit:])

    # =========================================================================
    # Background Apps
    # =========================================================================

    async def get_background_apps(self) -> List[BackgroundApp]:
        return list(self._background_apps)

    async def insert_background_app(self, app: InsertBackgroundApp) -> BackgroundApp:
        new_app = BackgroundApp(**app.model_dump(), id=self._next_id(), timestamp=datetime.now())
        self._background_apps.append(new_app)
        return new_app

    # =========================================================================
    # Optimizations
    # =========================================================================

    async def get_optimizations(self) -> List[Optimization]:
        return list(self._optimizations)

    async def insert_optimization(self, optimization: InsertOptimization) -> Optimization:
        data = optimization.model_dump()
        # 비어 있는 값은 기본값으로 채움
        data["priority"] = data.get("priority") or "medium"
        data["actions"] = data.get("actions") or []
        data["requires_permission"] = bool(data.get("requires_permission"))
        data["is_automated"] = bool(data.get("is_automated"))

        new_optimization = Optimization(**data, id=self._next_id(), timestamp=datetime.now())
        self._optimizations.append(new_optimization)
        logger.debug(f"최적화 저장 완료: id={new_optimization.id}, type={new_optimization.category}")
        return new_optimization

    # =========================================================================
    # Users
    # =========================================================================

    async def get_user(self, user_id: int) -> Optional[User]:
        return self._users.get(user_id)

    async def create_user(self, user: InsertUser) -> User:
        user_id = self._next_id()
        new_user = User(
            **user.model_dump(),
            id=user_id,
            ai_optimization_enabled=False,
            trial_start_date=datetime.now(),
        )
        self._users[user_id] = new_user
        return new_user

    async def get_or_create_user(self, username: str) -> User:
        """username으로 사용자를 찾고, 없으면 새로 생성합니다."""
        for user in self._users.values():
            if user.username == username:
                return user
        logger.info(f"👤 새 사용자 생성: {username}")
        return await self.create_user(InsertUser(username=username))

    async def can_access_pro_features(self, user_id: int) -> bool:
        """프리미엄 사용자이거나 체험판 기간이면 True"""
        user = await self.get_user(user_id)
        if not user:
            return False
        return user.is_premium or is_in_trial_period(user, settings.TRIAL_PERIOD_DAYS)

    async def update_user_ai_permissions(self, user_id: int, enabled: bool) -> None:
        user = await self.get_user(user_id)
        if user:
            user.ai_optimization_enabled = enabled
            self._users[user_id] = user
        else:
            logger.debug(f"사용자 {user_id}가 없어 AI 권한 변경을 건너뜁니다.")


def get_storage() -> MemStorage:
    """저장소 싱글톤 인스턴스 반환"""
    return MemStorage()
