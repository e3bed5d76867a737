from ai_router.engine.engine import MAX_BATCH_SIZE, RoutingEngine, build_engine
from ai_router.engine.executor import RequestExecutor
from ai_router.engine.fallback import FallbackController

__all__ = [
    "MAX_BATCH_SIZE",
    "FallbackController",
    "RequestExecutor",
    "RoutingEngine",
    "build_engine",
]
