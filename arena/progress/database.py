from motor.motor_asyncio import AsyncIOMotorDatabase
from datetime import datetime
from typing import Dict, Iterable


def default_progress(user_id: str, question_id: str) -> dict:
    return {
        "user_id": user_id,
        "question_id": question_id,
        "is_completed": False,
        "is_marked_for_revision": False,
    }


class ProgressRecorder:
    """
    Per-user question progress, one document per (user_id, question_id)
    in `user_progress`.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    async def get(self, user_id: str, question_id: str) -> dict:
        record = await self.db.user_progress.find_one(
            {"user_id": user_id, "question_id": question_id},
            {"_id": 0}
        )
        return record or default_progress(user_id, question_id)

    async def progress_map(self, user_id: str, question_ids: Iterable[str]) -> Dict[str, dict]:
        cursor = self.db.user_progress.find(
            {"user_id": user_id, "question_id": {"$in": list(question_ids)}},
            {"_id": 0}
        )
        records = await cursor.to_list(length=None)
        return {r["question_id"]: r for r in records}

    async def mark_completed(self, user_id: str, question_id: str) -> None:
        """Upsert: flips is_completed, a fresh record starts unflagged for revision"""
        await self.db.user_progress.update_one(
            {"user_id": user_id, "question_id": question_id},
            {
                "$set": {"is_completed": True, "updated_at": datetime.utcnow()},
                "$setOnInsert": {"is_marked_for_revision": False},
            },
            upsert=True
        )

    async def _toggle(self, user_id: str, question_id: str, field: str) -> dict:
        current = await self.get(user_id, question_id)
        new_value = not current.get(field, False)

        other = "is_marked_for_revision" if field == "is_completed" else "is_completed"
        await self.db.user_progress.update_one(
            {"user_id": user_id, "question_id": question_id},
            {
                "$set": {field: new_value, "updated_at": datetime.utcnow()},
                "$setOnInsert": {other: False},
            },
            upsert=True
        )

        current[field] = new_value
        return current

    async def toggle_completed(self, user_id: str, question_id: str) -> dict:
        return await self._toggle(user_id, question_id, "is_completed")

    async def toggle_revision(self, user_id: str, question_id: str) -> dict:
        return await self._toggle(user_id, question_id, "is_marked_for_revision")
