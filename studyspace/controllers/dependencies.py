"""Shared FastAPI dependency providers for controller layer."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from studyspace.services.space_engine import SpaceAggregationEngine


def get_space_engine(request: Request) -> SpaceAggregationEngine:
    engine = getattr(request.app.state, "space_engine", None)
    if engine is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Space engine is not initialized",
        )
    return engine
