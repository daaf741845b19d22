from motor.motor_asyncio import AsyncIOMotorDatabase
from collections import defaultdict
from typing import List, Optional, Set

PUBLIC_PROFILE_FIELDS = ("id", "prn", "username", "email", "name", "college", "location", "cgpa", "linkedin")
EDITABLE_PROFILE_FIELDS = ("name", "college", "location", "cgpa", "linkedin")


def public_profile(user: dict) -> dict:
    profile = {field: user.get(field) for field in PUBLIC_PROFILE_FIELDS}
    for field in ("name", "college", "location", "linkedin"):
        profile[field] = profile[field] or ""
    profile["cgpa"] = profile["cgpa"] or 0
    return profile


async def get_user_by_prn(db: AsyncIOMotorDatabase, prn: str) -> Optional[dict]:
    return await db.users.find_one({"prn": prn}, {"_id": 0, "password": 0})


async def get_completed_question_ids(db: AsyncIOMotorDatabase, user_id: str) -> Set[str]:
    records = await db.user_progress.find(
        {"user_id": user_id, "is_completed": True},
        {"_id": 0, "question_id": 1}
    ).to_list(length=None)
    return {r["question_id"] for r in records}

# ==================== PROGRESS SUMMARY ====================

async def get_learning_path_progress(db: AsyncIOMotorDatabase, completed: Set[str]) -> List[dict]:
    paths = await db.learning_paths.find({}, {"_id": 0}).to_list(length=None)

    result = []
    for path in paths:
        topics = await db.topics.find({"learning_path_id": path["id"]}, {"_id": 0, "id": 1}).to_list(length=None)
        topic_ids = [t["id"] for t in topics]

        questions = []
        if topic_ids:
            questions = await db.questions.find(
                {"topic_id": {"$in": topic_ids}}, {"_id": 0, "id": 1}
            ).to_list(length=None)

        total = len(questions)
        done = sum(1 for q in questions if q["id"] in completed)

        result.append({
            "id": path["id"],
            "title": path.get("title"),
            "description": path.get("description"),
            "difficulty": path.get("difficulty"),
            "completed_questions": done,
            "total_questions": total,
            "percentage": round(done / total * 100) if total > 0 else 0,
        })

    return result


async def get_completed_topics(db: AsyncIOMotorDatabase, completed: Set[str]) -> List[dict]:
    """Topics where every question is completed; empty topics never count"""
    topics = await db.topics.find({}, {"_id": 0}).to_list(length=None)
    paths = await db.learning_paths.find({}, {"_id": 0, "id": 1, "title": 1}).to_list(length=None)
    path_titles = {p["id"]: p.get("title") for p in paths}

    result = []
    for topic in topics:
        questions = await db.questions.find({"topic_id": topic["id"]}, {"_id": 0, "id": 1}).to_list(length=None)
        if not questions:
            continue

        if all(q["id"] in completed for q in questions):
            result.append({
                "id": topic["id"],
                "name": topic.get("name"),
                "learning_path_id": topic.get("learning_path_id"),
                "learning_path_title": path_titles.get(topic.get("learning_path_id")),
            })

    return result


async def get_activity(db: AsyncIOMotorDatabase, user_id: str) -> List[dict]:
    """Completed questions per day, for the streak heatmap"""
    records = await db.user_progress.find(
        {"user_id": user_id, "is_completed": True},
        {"_id": 0, "updated_at": 1}
    ).to_list(length=None)

    activity = defaultdict(int)
    for record in records:
        if record.get("updated_at"):
            activity[record["updated_at"].strftime("%Y-%m-%d")] += 1

    return [{"date": date, "count": count} for date, count in sorted(activity.items())]

# ==================== UPDATE ====================

async def update_profile(db: AsyncIOMotorDatabase, user_id: str, updates: dict) -> bool:
    updates = {k: v for k, v in updates.items() if k in EDITABLE_PROFILE_FIELDS}
    if not updates:
        return False

    result = await db.users.update_one({"id": user_id}, {"$set": updates})
    return result.matched_count > 0
