import logging

from fastapi import APIRouter, HTTPException, Depends, Query
from motor.motor_asyncio import AsyncIOMotorDatabase

from arena.dependencies import get_db, get_judge_client, get_progress_recorder, require_session
from arena.editor.database import get_question_bundle, get_test_cases, load_code, save_code
from arena.editor.guard import RunInProgressError, run_guard
from arena.editor.models import CodeRequest, RunMode
from arena.editor.orchestrator import SubmissionOrchestrator
from arena.judge.client import JudgeClient
from arena.judge.errors import JudgeError
from arena.judge.languages import Language
from arena.progress.database import ProgressRecorder
from arena.session import SessionContext

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Code Editor"])

# ==================== QUESTION ====================

@router.get("/questions/{question_id}")
async def get_editor_question(
    question_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    recorder: ProgressRecorder = Depends(get_progress_recorder),
    session: SessionContext = Depends(require_session)
):
    """Question details for the editor; hidden test cases are only counted"""
    try:
        bundle = await get_question_bundle(db, question_id)
        if not bundle:
            raise HTTPException(status_code=404, detail="Question not found")

        test_cases = await get_test_cases(db, question_id)
        visible = [tc for tc in test_cases if tc.visible]
        progress = await recorder.get(session.user_id, question_id)

        return {
            "status": "success",
            **bundle,
            "test_cases": [tc.model_dump() for tc in visible],
            "hidden_test_cases": len(test_cases) - len(visible),
            "max_score": sum(tc.points for tc in test_cases),
            "languages": [lang.value for lang in Language],
            "is_completed": progress.get("is_completed", False),
        }
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

# ==================== SAVED CODE ====================

@router.get("/questions/{question_id}/code")
async def get_saved_code(
    question_id: str,
    language: str = Query(Language.CPP.value),
    db: AsyncIOMotorDatabase = Depends(get_db),
    session: SessionContext = Depends(require_session)
):
    try:
        data = await load_code(db, session.user_id, question_id, language.lower())
        return {"status": "success", **data}
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/questions/{question_id}/code")
async def autosave_code(
    question_id: str,
    data: CodeRequest,
    db: AsyncIOMotorDatabase = Depends(get_db),
    session: SessionContext = Depends(require_session)
):
    try:
        saved = await save_code(db, session.user_id, question_id, data.language, data.code)
        return {"status": "success", "saved": saved}
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

# ==================== RUN / SUBMIT ====================

async def _execute(
    mode: RunMode,
    question_id: str,
    data: CodeRequest,
    db: AsyncIOMotorDatabase,
    judge: JudgeClient,
    recorder: ProgressRecorder,
    session: SessionContext,
) -> dict:
    failure_prefix = "Execution failed" if mode == RunMode.RUN else "Submission failed"

    try:
        with run_guard.hold(session.user_id, question_id):
            question = await db.questions.find_one({"id": question_id}, {"_id": 0, "id": 1})
            if not question:
                raise HTTPException(status_code=404, detail="Question not found")

            test_cases = await get_test_cases(db, question_id)

            orchestrator = SubmissionOrchestrator(judge, recorder)
            result = await orchestrator.execute(
                data.code,
                data.language,
                test_cases,
                mode,
                user_id=session.user_id,
                question_id=question_id,
            )

        response = {"status": "success", "result": result.model_dump(mode="json")}
        if result.completed:
            response["message"] = "You have successfully completed this question!"
        return response

    except RunInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except JudgeError as e:
        raise HTTPException(status_code=e.http_status, detail=f"{failure_prefix}: {e.message}")
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("[RUN] unexpected failure for question %s", question_id)
        raise HTTPException(status_code=500, detail=f"{failure_prefix}: {e}")


@router.post("/questions/{question_id}/run")
async def run_code(
    question_id: str,
    data: CodeRequest,
    db: AsyncIOMotorDatabase = Depends(get_db),
    judge: JudgeClient = Depends(get_judge_client),
    recorder: ProgressRecorder = Depends(get_progress_recorder),
    session: SessionContext = Depends(require_session)
):
    """Run against visible test cases only. No progress side effects."""
    return await _execute(RunMode.RUN, question_id, data, db, judge, recorder, session)


@router.post("/questions/{question_id}/submit")
async def submit_code(
    question_id: str,
    data: CodeRequest,
    db: AsyncIOMotorDatabase = Depends(get_db),
    judge: JudgeClient = Depends(get_judge_client),
    recorder: ProgressRecorder = Depends(get_progress_recorder),
    session: SessionContext = Depends(require_session)
):
    """
    Submit against every test case, hidden ones included.
    A full score marks the question completed.
    """
    return await _execute(RunMode.SUBMIT, question_id, data, db, judge, recorder, session)
