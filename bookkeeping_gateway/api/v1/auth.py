"""POST /v1/auth/login, /v1/auth/register - pass-through authentication"""

from fastapi import APIRouter, Depends, HTTPException

from bookkeeping_gateway.api.v1.schemas import LoginRequest, RegisterRequest
from bookkeeping_gateway.api.dependencies import get_bookkeeping_client
from bookkeeping_gateway.domain.models import AuthResult
from bookkeeping_gateway.infrastructure.clients.bookkeeping import BookkeepingClient

router = APIRouter()


@router.post("/auth/login", response_model=AuthResult)
async def login(body: LoginRequest, client: BookkeepingClient = Depends(get_bookkeeping_client)):
    """
    Exchange credentials for a bearer token.

    The token is returned to the caller, who sends it back as
    ``Authorization: Bearer <token>`` on every later request.
    """
    result = await client.login(body.email, body.password)
    if not result.success or not result.token:
        raise HTTPException(status_code=401, detail=result.message or "Invalid credentials")
    return result


@router.post("/auth/register", response_model=AuthResult, status_code=201)
async def register(body: RegisterRequest, client: BookkeepingClient = Depends(get_bookkeeping_client)):
    result = await client.register(body.name, body.email, body.password)
    if not result.success:
        raise HTTPException(status_code=400, detail=result.message or "Registration failed")
    return result
