"""Auth endpoints: register, login, refresh, logout, me."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from question_api.auth import service, tokens
from question_api.auth.dependencies import CurrentUser, get_current_user
from question_api.auth.schemas import (
    AuthResponse,
    IdentityResponse,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
)
from question_api.db.client import get_session
from question_api.utils.responses import success_response

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/register", status_code=201, summary="Register a new user", description="Create a user, creating the company if it does not exist yet. The first user of a company becomes its admin.")
async def register(body: RegisterRequest, session: AsyncSession = Depends(get_session)):
    result = await service.register(session, body.email, body.password, body.name, body.company_name)
    return success_response(AuthResponse.model_validate(result), "User registered successfully")


@router.post("/login", summary="Login", description="Authenticate with email and password, returns the user, its company and a token pair.")
async def login(body: LoginRequest, session: AsyncSession = Depends(get_session)):
    result = await service.login(session, body.email, body.password)
    return success_response(AuthResponse.model_validate(result), "Login successful")


@router.post("/refresh", summary="Refresh tokens", description="Exchange a refresh token for a new token pair. The old refresh token can not be used again.")
async def refresh(body: RefreshRequest, session: AsyncSession = Depends(get_session)):
    if not body.refresh_token:
        raise HTTPException(status_code=400, detail="Refresh token is required")
    pair = await tokens.refresh(session, body.refresh_token)
    return success_response(TokenResponse.model_validate(pair), "Token refreshed successfully")


@router.post("/logout", summary="Logout", description="Revoke a refresh token. Always succeeds.")
async def logout(body: RefreshRequest | None = None, session: AsyncSession = Depends(get_session)):
    if body is not None and body.refresh_token:
        await service.logout(session, body.refresh_token)
    return success_response(None, "Logout successful")


@router.get("/me", summary="Current identity", description="Return the identity claims carried by the access token.")
async def me(user: CurrentUser = Depends(get_current_user)):
    identity = IdentityResponse(user_id=user.id, email=user.email, role=user.role, company_id=user.company_id)
    return success_response(identity, "Authenticated")
