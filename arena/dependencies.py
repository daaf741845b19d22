import httpx
from fastapi import Depends, HTTPException, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from arena.config import JUDGE_REQUEST_TIMEOUT_SECONDS
from arena.judge.client import JudgeClient
from arena.progress.database import ProgressRecorder
from arena.session import SessionContext, SessionManager, session_manager


def get_db_instance():
    """Get database from main module"""
    from arena.main import db
    return db

# ==================== DEPENDENCY FUNCTIONS ====================

async def get_db() -> AsyncIOMotorDatabase:
    """Database dependency"""
    return get_db_instance()


def get_session_manager() -> SessionManager:
    return session_manager


async def require_session(
    request: Request,
    sessions: SessionManager = Depends(get_session_manager)
) -> SessionContext:
    ctx = sessions.load(request)
    if ctx is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return ctx


async def get_progress_recorder(db: AsyncIOMotorDatabase = Depends(get_db)) -> ProgressRecorder:
    return ProgressRecorder(db)


async def get_judge_client():
    """One HTTP client per request, closed when the request finishes"""
    async with httpx.AsyncClient(timeout=JUDGE_REQUEST_TIMEOUT_SECONDS) as client:
        yield JudgeClient(client)
