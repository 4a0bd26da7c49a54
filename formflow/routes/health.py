"""Liveness endpoint reporting store reachability per journey."""

from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health", summary="Service health")
def health(request: Request) -> dict:
    stores = {slug: bool(store.ping()) for slug, store in request.app.state.stores.items()}
    return {
        "status": "ok" if all(stores.values()) else "degraded",
        "store": request.app.state.config.store.backend,
        "journeys": stores,
    }


__all__ = ["router"]
