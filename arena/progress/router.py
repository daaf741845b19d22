from fastapi import APIRouter, HTTPException, Depends

from arena.dependencies import get_progress_recorder, require_session
from arena.progress.database import ProgressRecorder
from arena.session import SessionContext

router = APIRouter(tags=["Progress"])


@router.get("/questions/{question_id}")
async def get_question_progress(
    question_id: str,
    recorder: ProgressRecorder = Depends(get_progress_recorder),
    session: SessionContext = Depends(require_session)
):
    try:
        progress = await recorder.get(session.user_id, question_id)
        return {"status": "success", "progress": progress}
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/questions/{question_id}/toggle-completed")
async def toggle_completed(
    question_id: str,
    recorder: ProgressRecorder = Depends(get_progress_recorder),
    session: SessionContext = Depends(require_session)
):
    """Mark done / undone from the question table"""
    try:
        progress = await recorder.toggle_completed(session.user_id, question_id)
        return {"status": "success", "progress": progress}
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/questions/{question_id}/toggle-revision")
async def toggle_revision(
    question_id: str,
    recorder: ProgressRecorder = Depends(get_progress_recorder),
    session: SessionContext = Depends(require_session)
):
    try:
        progress = await recorder.toggle_revision(session.user_id, question_id)
        return {"status": "success", "progress": progress}
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
