from fastapi import APIRouter, HTTPException, Depends, Query
from motor.motor_asyncio import AsyncIOMotorDatabase

from arena.dependencies import get_db, require_session
from arena.learning.database import QUESTION_FILTERS, get_assigned_paths, get_topics_with_questions
from arena.session import SessionContext

router = APIRouter(tags=["Learning Paths"])


@router.get("/paths")
async def list_learning_paths(
    db: AsyncIOMotorDatabase = Depends(get_db),
    session: SessionContext = Depends(require_session)
):
    try:
        paths = await get_assigned_paths(db, session.user_id)
        return {"status": "success", "learning_paths": paths, "count": len(paths)}
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/paths/{path_id}/topics")
async def list_topics(
    path_id: str,
    status: str = Query("all"),
    db: AsyncIOMotorDatabase = Depends(get_db),
    session: SessionContext = Depends(require_session)
):
    """Topics of a path with each question's progress for the current user"""
    if status not in QUESTION_FILTERS:
        raise HTTPException(status_code=400, detail=f"status must be one of: {sorted(QUESTION_FILTERS)}")

    try:
        topics = await get_topics_with_questions(db, path_id, session.user_id, status)
        return {"status": "success", "path_id": path_id, "topics": topics, "count": len(topics)}
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
