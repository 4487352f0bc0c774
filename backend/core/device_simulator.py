"""
디바이스 지표 시뮬레이터

실제 텔레메트리를 수집하지 않고, 직전 스냅샷에서 조금씩 움직이는
랜덤 워크로 새 스냅샷을 만듭니다. 스케줄러가 주기적으로 호출합니다.
"""
import logging
import random
from typing import Optional

from database.memory_storage import MemStorage, get_storage
from database.models import DeviceStats, InsertDeviceStats

logger = logging.getLogger(__name__)

# 지표별 (최대 변화폭, 최솟값, 최댓값)
METRIC_BOUNDS = {
    "cpu_usage": (8, 0, 100),
    "ram_usage": (5, 0, 100),
    "battery_level": (2, 0, 100),
    "storage_usage": (1, 0, 100),
    "network_usage": (10, 0, 100),
    "temperature": (2, 25, 60),
}


class DeviceSimulator:
    """랜덤 워크 기반 디바이스 스냅샷 생성기"""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def sample(self, previous: DeviceStats) -> InsertDeviceStats:
        """직전 스냅샷에서 한 걸음 이동한 새 스냅샷을 반환합니다."""
        values = {}
        for metric, (max_step, lower, upper) in METRIC_BOUNDS.items():
            current = getattr(previous, metric)
            step = self.rng.randint(-max_step, max_step)
            values[metric] = max(lower, min(upper, current + step))
        return InsertDeviceStats(**values)

    async def record_sample(self, storage: Optional[MemStorage] = None) -> DeviceStats:
        """새 스냅샷을 생성해 저장소에 기록합니다."""
        storage = storage or get_storage()
        previous = await storage.get_latest_device_stats()
        stored = await storage.insert_device_stats(self.sample(previous))
        logger.debug(
            f"📈 시뮬레이션 스냅샷 기록: id={stored.id}, cpu={stored.cpu_usage}, "
            f"ram={stored.ram_usage}, battery={stored.battery_level}"
        )
        return stored
