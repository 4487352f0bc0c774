from .advisor_client import AdvisorClient, AdvisorUnavailableError, build_system_state
from .optimization_agent import OptimizationAgent, get_optimization_agent
from .response_interpreter import (
    ExtractionNotFound, InterpretationError, NoValidCandidates, RecommendationCandidate,
    ResponseInterpreter, StructuralParseFailure, build_fallback_recommendation, interpret
)

__all__ = [
    "AdvisorClient", "AdvisorUnavailableError", "build_system_state",
    "OptimizationAgent", "get_optimization_agent",
    "ExtractionNotFound", "InterpretationError", "NoValidCandidates", "RecommendationCandidate",
    "ResponseInterpreter", "StructuralParseFailure", "build_fallback_recommendation", "interpret",
]
