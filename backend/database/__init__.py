from .memory_storage import MemStorage, get_storage
from .models import (
    BackgroundApp, DeviceStats, InsertBackgroundApp, InsertDeviceStats,
    InsertOptimization, InsertUser, Optimization, User, is_in_trial_period
)

__all__ = [
    "MemStorage", "get_storage",
    "BackgroundApp", "DeviceStats", "InsertBackgroundApp", "InsertDeviceStats",
    "InsertOptimization", "InsertUser", "Optimization", "User",
    "is_in_trial_period",
]
