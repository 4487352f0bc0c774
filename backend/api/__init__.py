from .routes import router
from .schemas import (
    HealthResponse, ProAccessResponse, SuggestionResponse, SystemAnalysisResponse,
    ToggleAIOptimizationRequest, ToggleAIOptimizationResponse
)

__all__ = [
    "router",
    "HealthResponse", "ProAccessResponse", "SuggestionResponse", "SystemAnalysisResponse",
    "ToggleAIOptimizationRequest", "ToggleAIOptimizationResponse"
]
