"""Liveness endpoint, served at both ``/health`` and ``/api/health``."""

from fastapi import APIRouter

from .models import HealthResponse

SERVICE_NAME = "chatbot-backend"

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
@router.get("/api/health", response_model=HealthResponse, include_in_schema=False)
async def health() -> HealthResponse:
    return HealthResponse(service=SERVICE_NAME)
