"""
규칙 기반 시스템 분석

AI 분석과 별개로, 임계값 규칙만으로 즉시 계산되는 제안과 종합 성능 점수를 제공합니다.
"""

from dataclasses import dataclass, asdict
from typing import Dict, List

from database.models import DeviceStats

# 종합 성능 점수 가중치 (합계 1.0)
PERFORMANCE_WEIGHTS = {
    "cpu": 0.3,
    "ram": 0.3,
    "battery": 0.2,
    "storage": 0.2,
}


@dataclass
class OptimizationSuggestion:
    """규칙 기반 최적화 제안"""
    title: str
    description: str
    impact: int

    def to_dict(self) -> Dict:
        return asdict(self)


def analyze_device_stats(stats: DeviceStats) -> List[OptimizationSuggestion]:
    """임계값을 넘은 지표마다 제안을 하나씩 생성합니다."""
    suggestions: List[OptimizationSuggestion] = []

    if stats.cpu_usage > 70:
        suggestions.append(OptimizationSuggestion(
            title="High CPU Usage Detected",
            description="Multiple resource-intensive applications are running. "
                        "Consider closing unused applications to improve performance.",
            impact=25,
        ))

    if stats.ram_usage > 80:
        suggestions.append(OptimizationSuggestion(
            title="Memory Optimization Required",
            description="System memory is reaching capacity. Clear application cache and close background processes.",
            impact=20,
        ))

    if stats.battery_level < 30:
        suggestions.append(OptimizationSuggestion(
            title="Battery Optimization",
            description="Enable power saving mode and adjust screen brightness to extend battery life.",
            impact=15,
        ))

    if stats.storage_usage > 85:
        suggestions.append(OptimizationSuggestion(
            title="Storage Space Critical",
            description="Low storage space may impact system performance. "
                        "Remove unnecessary files and clear temporary data.",
            impact=18,
        ))

    return suggestions


def calculate_overall_performance(stats: DeviceStats) -> int:
    """0~100 종합 성능 점수 (높을수록 여유 있음)"""
    cpu_score = 100 - stats.cpu_usage
    ram_score = 100 - stats.ram_usage
    battery_score = stats.battery_level
    storage_score = 100 - stats.storage_usage

    # .5는 올림 (round()의 은행가 반올림을 쓰지 않음)
    weighted = (
        cpu_score * PERFORMANCE_WEIGHTS["cpu"]
        + ram_score * PERFORMANCE_WEIGHTS["ram"]
        + battery_score * PERFORMANCE_WEIGHTS["battery"]
        + storage_score * PERFORMANCE_WEIGHTS["storage"]
    )
    return int(weighted + 0.5)
