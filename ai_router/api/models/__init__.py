from ai_router.api.models.requests import (
    BatchRequest,
    ChatRequest,
    CodeRequest,
    CostEstimateRequest,
    CreativeRequest,
    Preferences,
    SwitchProviderRequest,
)

__all__ = [
    "BatchRequest",
    "ChatRequest",
    "CodeRequest",
    "CostEstimateRequest",
    "CreativeRequest",
    "Preferences",
    "SwitchProviderRequest",
]
