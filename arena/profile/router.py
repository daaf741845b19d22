from fastapi import APIRouter, HTTPException, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel, Field
from typing import Optional

from arena.dependencies import get_db, require_session
from arena.profile.database import (
    get_user_by_prn, get_completed_question_ids, get_learning_path_progress,
    get_completed_topics, get_activity, public_profile, update_profile
)
from arena.session import SessionContext

router = APIRouter(tags=["Profile"])


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    college: Optional[str] = None
    location: Optional[str] = None
    cgpa: Optional[float] = Field(None, ge=0, le=10)
    linkedin: Optional[str] = None


@router.put("/me")
async def update_my_profile(
    data: ProfileUpdate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    session: SessionContext = Depends(require_session)
):
    """Only fields present in the body are written"""
    updates = data.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No profile fields provided")

    try:
        updated = await update_profile(db, session.user_id, updates)
        if not updated:
            raise HTTPException(status_code=404, detail="User not found")
        return {"status": "success", "message": "Profile updated successfully"}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{prn}")
async def get_profile(prn: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    """Public profile with learning progress, completed topics and activity"""
    try:
        user = await get_user_by_prn(db, prn)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")

        completed = await get_completed_question_ids(db, user["id"])

        return {
            "status": "success",
            "profile": public_profile(user),
            "learning_paths": await get_learning_path_progress(db, completed),
            "completed_topics": await get_completed_topics(db, completed),
            "activity": await get_activity(db, user["id"]),
        }
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
