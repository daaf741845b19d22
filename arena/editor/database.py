from motor.motor_asyncio import AsyncIOMotorDatabase
from datetime import datetime, timedelta
from typing import List, Optional

from arena.config import CODE_AUTOSAVE_MIN_INTERVAL_SECONDS
from arena.editor.models import TestCase

# ==================== QUESTION QUERIES ====================

async def get_question(db: AsyncIOMotorDatabase, question_id: str) -> Optional[dict]:
    return await db.questions.find_one({"id": question_id}, {"_id": 0})


async def get_question_bundle(db: AsyncIOMotorDatabase, question_id: str) -> Optional[dict]:
    """Question plus everything the editor page shows next to it"""
    question = await get_question(db, question_id)
    if not question:
        return None

    examples = await db.examples.find({"question_id": question_id}, {"_id": 0}).to_list(length=None)
    constraints = await db.constraints.find({"question_id": question_id}, {"_id": 0}).to_list(length=None)
    templates = await db.language_templates.find({"question_id": question_id}, {"_id": 0}).to_list(length=None)

    return {
        "question": question,
        "examples": examples,
        "constraints": constraints,
        "language_templates": templates,
    }


async def get_test_cases(db: AsyncIOMotorDatabase, question_id: str) -> List[TestCase]:
    cursor = db.test_cases.find({"question_id": question_id})
    docs = await cursor.to_list(length=None)
    return [TestCase.from_document(doc) for doc in docs]

# ==================== SAVED CODE ====================

async def get_template(db: AsyncIOMotorDatabase, question_id: str, language: str) -> Optional[str]:
    templates = await db.language_templates.find({"question_id": question_id}, {"_id": 0}).to_list(length=None)
    for template in templates:
        if (template.get("name") or "").lower() == language:
            return template.get("template")
    return None


async def load_code(db: AsyncIOMotorDatabase, user_id: str, question_id: str, language: str) -> dict:
    """Saved code for this language, else the language template"""
    saved = await db.user_code.find_one(
        {"user_id": user_id, "question_id": question_id, "language": language},
        {"_id": 0}
    )
    if saved and saved.get("code"):
        return {"language": language, "code": saved["code"], "source": "saved"}

    template = await get_template(db, question_id, language)
    if template is not None:
        return {"language": language, "code": template, "source": "template"}

    return {"language": language, "code": "", "source": "empty"}


async def save_code(db: AsyncIOMotorDatabase, user_id: str, question_id: str, language: str, code: str) -> bool:
    """
    Autosave. Returns False when the previous save for the same
    (user, question, language) is younger than the autosave interval.
    """
    key = {"user_id": user_id, "question_id": question_id, "language": language}
    now = datetime.utcnow()

    existing = await db.user_code.find_one(key, {"_id": 0, "updated_at": 1})
    if existing and existing.get("updated_at"):
        if now - existing["updated_at"] < timedelta(seconds=CODE_AUTOSAVE_MIN_INTERVAL_SECONDS):
            return False

    await db.user_code.update_one(
        key,
        {
            "$set": {"code": code, "updated_at": now},
            "$setOnInsert": {"created_at": now},
        },
        upsert=True
    )
    return True
