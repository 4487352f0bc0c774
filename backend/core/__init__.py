from .device_simulator import DeviceSimulator
from .system_analysis import OptimizationSuggestion, analyze_device_stats, calculate_overall_performance

__all__ = [
    'DeviceSimulator',
    'OptimizationSuggestion',
    'analyze_device_stats',
    'calculate_overall_performance',
]
