from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from process_registry.api.deps import db_session, token_service_dep
from process_registry.auth.tokens import TokenService
from process_registry.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


class LoginRequest(BaseModel):
    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=1, max_length=256)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


@router.post("/login", name="auth.login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(db_session),
    tokens: TokenService = Depends(token_service_dep),
) -> TokenResponse:
    token = await AuthService(session=session, tokens=tokens).login(
        email=body.email, password=body.password
    )
    return TokenResponse(access_token=token)
