import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from personal_manager.core.errors import AuthError
from personal_manager.core.responses import ok
from personal_manager.deps import get_db
from personal_manager.models.entities import User
from personal_manager.models.schemas import ApiResponse, AuthStatus, LoginIn, SessionUser
from personal_manager.models.store import run_query

log = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=ApiResponse[SessionUser])
async def login(payload: LoginIn, request: Request, db: AsyncSession = Depends(get_db)):
    # plain comparison: credentials are stored as entered
    rows = await run_query(
        db, select(User).where(User.username == payload.username, User.password == payload.password)
    )
    if not rows:
        log.info("[auth] rejected login for %r", payload.username)
        raise AuthError("Invalid credentials")
    user = SessionUser.model_validate(rows[0][0])
    request.session["user"] = user.model_dump()
    log.info("[auth] %r logged in", user.username)
    return ok(user, "Login successful")


@router.post("/logout", response_model=ApiResponse[None])
async def logout(request: Request):
    request.session.clear()
    return ok(None, "Logout successful")


@router.get("/status", response_model=ApiResponse[AuthStatus])
async def status(request: Request):
    user = request.session.get("user")
    return ok(AuthStatus(authenticated=bool(user), user=user))
