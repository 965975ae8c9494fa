"""
Shared FastAPI dependencies for SiteCraft routes
"""
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict, List
import logging

from fastapi import HTTPException, Request, status

from config import settings
from services.conversation_service import SessionStore
from services.export_service import ExportService
from services.generation_service import GenerationService
from services.preview_service import PreviewService
from services.workspace_service import WorkspaceStore

logger = logging.getLogger(__name__)

# Simple in-memory rate limiter storage
rate_limiter_storage: Dict[str, List[datetime]] = defaultdict(list)

# Global service instances - created on first use
generation_service = None
session_store = None
workspace_store = None
preview_service = None
export_service = None


def get_generation_service() -> GenerationService:
    """Get or create the generation service"""
    global generation_service
    if generation_service is None:
        generation_service = GenerationService()
    return generation_service


def get_session_store() -> SessionStore:
    """Get or create the conversation session store"""
    global session_store
    if session_store is None:
        session_store = SessionStore(get_generation_service())
    return session_store


def get_workspace_store() -> WorkspaceStore:
    """Get or create the workspace store"""
    global workspace_store
    if workspace_store is None:
        workspace_store = WorkspaceStore()
    return workspace_store


def get_preview_service() -> PreviewService:
    global preview_service
    if preview_service is None:
        preview_service = PreviewService()
    return preview_service


def get_export_service() -> ExportService:
    global export_service
    if export_service is None:
        export_service = ExportService()
    return export_service


def get_client_ip(request: Request) -> str:
    """Get client IP address"""
    # Check for forwarded headers first (for reverse proxies)
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    return request.client.host if request.client else "unknown"


async def check_rate_limit(request: Request):
    """Simple IP-based rate limiting for generation endpoints."""
    client_ip = get_client_ip(request)
    current_time = datetime.now()

    # Clean old requests outside the window
    rate_limiter_storage[client_ip] = [
        req_time for req_time in rate_limiter_storage[client_ip]
        if current_time - req_time < timedelta(seconds=settings.RATE_LIMIT_WINDOW)
    ]

    if len(rate_limiter_storage[client_ip]) >= settings.RATE_LIMIT_REQUESTS:
        logger.warning(f"Rate limit exceeded for IP: {client_ip}")
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=f"Rate limit exceeded. Maximum {settings.RATE_LIMIT_REQUESTS} requests per {settings.RATE_LIMIT_WINDOW} seconds.",
            headers={"Retry-After": str(settings.RATE_LIMIT_WINDOW)}
        )

    rate_limiter_storage[client_ip].append(current_time)
    logger.debug(f"Current request count for {client_ip}: {len(rate_limiter_storage[client_ip])}")
