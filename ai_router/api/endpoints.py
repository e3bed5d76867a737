import logging
import time
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from ai_router.api.models import (
    BatchRequest,
    ChatRequest,
    CodeRequest,
    CostEstimateRequest,
    CreativeRequest,
    SwitchProviderRequest,
)
from ai_router.api.services.error_handling import ErrorResponseBuilder
from ai_router.core.exceptions import RouterError
from ai_router.core.models import RequestSpec, RoutedResult
from ai_router.engine import RoutingEngine

router = APIRouter(prefix="/v1")

logger = logging.getLogger(__name__)

COST_DISCLAIMER = (
    "This is an estimate. Actual costs may vary based on model responses and tokenization."
)


def get_engine(request: Request) -> RoutingEngine:
    """Routing engine attached to the app at startup."""
    return request.app.state.engine


async def _route(engine: RoutingEngine, spec: RequestSpec) -> Any:
    try:
        routed = await engine.route(spec)
    except RouterError as e:
        return ErrorResponseBuilder.routing_failure(e)
    return {"success": True, "response": routed.to_dict()}


@router.post("/chat")
async def chat(body: ChatRequest, engine: RoutingEngine = Depends(get_engine)) -> Any:
    """Route a chat message to the best available provider"""
    logger.info(
        f"Chat request: provider={body.provider or 'auto'} message_length={len(body.message)}"
    )
    return await _route(engine, body.to_spec())


@router.post("/code")
async def code(body: CodeRequest, engine: RoutingEngine = Depends(get_engine)) -> Any:
    """Route a code-generation request"""
    logger.info(f"Code request: language={body.language} framework={body.framework}")
    return await _route(engine, body.to_spec())


@router.post("/creative")
async def creative(body: CreativeRequest, engine: RoutingEngine = Depends(get_engine)) -> Any:
    """Route a creative-writing request"""
    logger.info(f"Creative request: style={body.style} length={body.length}")
    return await _route(engine, body.to_spec())


@router.post("/batch")
async def batch(body: BatchRequest, engine: RoutingEngine = Depends(get_engine)) -> Any:
    """Route up to ten chat requests concurrently"""
    logger.info(f"Batch request: {len(body.requests)} item(s)")
    outcomes = await engine.route_many([item.to_spec() for item in body.requests])

    responses: list[dict[str, Any]] = []
    total_cost = 0.0
    total_tokens = 0
    for outcome in outcomes:
        if isinstance(outcome, RoutedResult):
            responses.append(outcome.to_dict())
            total_cost += outcome.result.usage.cost_amount
            total_tokens += outcome.result.usage.total_tokens
        else:
            responses.append({"error": outcome.to_dict()})

    return {
        "success": True,
        "batchId": f"batch_{int(time.time() * 1000)}",
        "totalRequests": len(outcomes),
        "responses": responses,
        "totalCost": total_cost,
        "totalTokens": total_tokens,
    }


@router.post("/switch-provider")
async def switch_provider(
    body: SwitchProviderRequest, engine: RoutingEngine = Depends(get_engine)
) -> Any:
    """Re-route a conversation to whichever provider is best for quality now"""
    logger.info(
        f"Provider switch requested: from={body.current_provider} reason={body.reason or '-'}"
    )
    return await _route(engine, body.to_spec())


@router.post("/cost-estimate")
async def cost_estimate(
    body: CostEstimateRequest, engine: RoutingEngine = Depends(get_engine)
) -> Any:
    """Estimate the cost of a message without calling any provider"""
    try:
        estimate = engine.estimate_cost(
            body.message, provider_id=body.provider, model=body.model, max_tokens=body.max_tokens
        )
    except RouterError as e:
        return ErrorResponseBuilder.routing_failure(e)

    payload = estimate.to_dict()
    payload["disclaimer"] = COST_DISCLAIMER
    return {"success": True, "estimate": payload}


@router.get("/providers")
async def providers(
    include_health: bool = Query(False, alias="includeHealth"),
    engine: RoutingEngine = Depends(get_engine),
) -> dict[str, Any]:
    """List credentialed providers with their usage"""
    health = await engine.check_health() if include_health else {}
    catalog = engine.provider_catalog()["providers"]

    items = []
    for provider in engine.availability.available_providers():
        usage = engine.tracker.usage(provider.id)
        item = {"id": provider.id, **catalog[provider.id], "stats": usage.to_dict()}
        if include_health:
            item["health"] = health.get(provider.id, False)
        items.append(item)

    return {
        "providers": items,
        "total": len(items),
        "active": sum(1 for i in items if i["stats"]["remaining"] > 0 and i.get("health", True)),
    }


@router.get("/health")
async def health(engine: RoutingEngine = Depends(get_engine)) -> dict[str, Any]:
    """Probe every credentialed provider"""
    results = await engine.check_health()
    healthy = sum(1 for ok in results.values() if ok)
    return {
        "timestamp": datetime.now().isoformat(),
        "providers": results,
        "summary": {
            "healthy": healthy,
            "total": len(results),
            "healthyPercentage": (healthy / len(results)) * 100 if results else 0.0,
        },
    }


@router.get("/stats")
async def stats(engine: RoutingEngine = Depends(get_engine)) -> dict[str, Any]:
    """Usage statistics per provider"""
    return {"timestamp": datetime.now().isoformat(), **engine.usage_stats().to_dict()}


@router.get("/config")
async def provider_config(engine: RoutingEngine = Depends(get_engine)) -> JSONResponse:
    """Public provider catalog and which credentials are present"""
    catalog = engine.provider_catalog()
    return JSONResponse(
        content={
            "success": True,
            "config": catalog["providers"],
            "credentials": catalog["credentials"],
        }
    )
