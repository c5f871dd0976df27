"""Dependency injection for FastAPI endpoints"""

from datetime import date
from typing import Optional

from fastapi import Request
from bookkeeping_gateway.infrastructure.clients.bookkeeping import BookkeepingClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Token part of an ``Authorization: Bearer <token>`` header"""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_bookkeeping_client(request: Request) -> BookkeepingClient:
    """Provide a Bookkeeping API client carrying the caller's bearer token"""
    return BookkeepingClient(token=bearer_token(request.headers.get("Authorization")))


def get_today() -> date:
    """Reference date for overdue checks and daily counts"""
    return date.today()
