from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import List

from arena.progress.database import ProgressRecorder

PATH_DIFFICULTIES = {"easy", "medium", "hard", "theory"}
QUESTION_FILTERS = {"all", "solved", "unsolved", "revision"}


def normalize_path(path: dict) -> dict:
    path["difficulty"] = path.get("difficulty") if path.get("difficulty") in PATH_DIFFICULTIES else "medium"
    path["title"] = path.get("title") or ""
    path["description"] = path.get("description") or ""
    return path


def filter_questions(questions: List[dict], status: str) -> List[dict]:
    if status == "solved":
        return [q for q in questions if q["is_completed"]]
    if status == "unsolved":
        return [q for q in questions if not q["is_completed"]]
    if status == "revision":
        return [q for q in questions if q["is_marked_for_revision"]]
    return questions

# ==================== LEARNING PATHS ====================

async def get_assigned_paths(db: AsyncIOMotorDatabase, user_id: str) -> List[dict]:
    """Learning paths assigned to the user, with topic and question counts"""
    user = await db.users.find_one({"id": user_id}, {"_id": 0, "assigned_learning_paths": 1})
    assigned = (user or {}).get("assigned_learning_paths") or []
    if not assigned:
        return []

    paths = await db.learning_paths.find({"id": {"$in": assigned}}, {"_id": 0}).to_list(length=None)

    result = []
    for path in paths:
        topics = await db.topics.find({"learning_path_id": path["id"]}, {"_id": 0, "id": 1}).to_list(length=None)
        topic_ids = [t["id"] for t in topics]
        questions_count = await db.questions.count_documents({"topic_id": {"$in": topic_ids}}) if topic_ids else 0

        path = normalize_path(path)
        path["topics_count"] = len(topics)
        path["questions_count"] = questions_count
        result.append(path)

    return result

# ==================== TOPICS ====================

async def get_topics_with_questions(
    db: AsyncIOMotorDatabase,
    path_id: str,
    user_id: str,
    status: str = "all"
) -> List[dict]:
    recorder = ProgressRecorder(db)
    topics = await db.topics.find({"learning_path_id": path_id}, {"_id": 0}).to_list(length=None)

    for topic in topics:
        questions = await db.questions.find(
            {"topic_id": topic["id"]},
            {"_id": 0, "id": 1, "title": 1, "solution_link": 1, "practice_link": 1, "difficulty": 1}
        ).sort("id", 1).to_list(length=None)

        progress = await recorder.progress_map(user_id, [q["id"] for q in questions])
        for question in questions:
            record = progress.get(question["id"], {})
            question["is_completed"] = record.get("is_completed", False)
            question["is_marked_for_revision"] = record.get("is_marked_for_revision", False)

        topic["questions"] = filter_questions(questions, status)

    return topics
