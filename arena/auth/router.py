import logging

from fastapi import APIRouter, HTTPException, Depends, Header, Query, Request, Response
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel

from arena.auth.database import (
    AutoLoginError, create_auto_login_token, find_user, find_user_by_credentials,
    redeem_auto_login_token
)
from arena.config import AUTO_LOGIN_SERVICE_KEY, DEFAULT_APP_ORIGIN
from arena.dependencies import get_db, get_session_manager, require_session
from arena.session import SessionContext, SessionManager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


class LoginRequest(BaseModel):
    prn: str
    password: str


class AutoLoginLinkRequest(BaseModel):
    user_id: str


@router.post("/login")
async def login(
    data: LoginRequest,
    response: Response,
    db: AsyncIOMotorDatabase = Depends(get_db),
    sessions: SessionManager = Depends(get_session_manager)
):
    try:
        user = await find_user_by_credentials(db, data.prn, data.password)
        if not user:
            raise HTTPException(status_code=401, detail="Invalid credentials")

        sessions.save(response, SessionContext.from_user(user))
        return {"status": "success", "user": user}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/logout")
async def logout(response: Response, sessions: SessionManager = Depends(get_session_manager)):
    sessions.clear(response)
    return {"status": "success", "message": "Logged out"}


@router.get("/me")
async def me(session: SessionContext = Depends(require_session)):
    return {"status": "success", "user": session.to_dict()}

# ==================== AUTO LOGIN ====================

@router.post("/auto-login-links")
async def create_auto_login_link(
    data: AutoLoginLinkRequest,
    request: Request,
    x_service_key: str = Header(None),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """Issue a single-use login link for a user (called by a trusted service)"""
    if not AUTO_LOGIN_SERVICE_KEY or x_service_key != AUTO_LOGIN_SERVICE_KEY:
        raise HTTPException(status_code=401, detail="Unauthorized")

    try:
        user = await find_user(db, data.user_id)
        if not user:
            raise HTTPException(status_code=404, detail="Invalid user ID")

        token = await create_auto_login_token(db, data.user_id)
        origin = request.headers.get("origin") or DEFAULT_APP_ORIGIN
        logger.info("[AUTH] auto-login link issued for user %s", data.user_id)

        return {
            "success": True,
            "login_url": f"{origin}/auto-login?token={token}",
            "message": "Auto-login URL generated successfully"
        }
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/auto-login")
async def auto_login(
    response: Response,
    token: str = Query(None),
    db: AsyncIOMotorDatabase = Depends(get_db),
    sessions: SessionManager = Depends(get_session_manager)
):
    if not token:
        raise HTTPException(status_code=401, detail="Invalid login link")

    try:
        user = await redeem_auto_login_token(db, token)
    except AutoLoginError as e:
        raise HTTPException(status_code=401, detail=str(e))

    sessions.save(response, SessionContext.from_user(user))
    return {"status": "success", "user": user}
