from motor.motor_asyncio import AsyncIOMotorDatabase
from datetime import datetime, timedelta
from typing import Optional
import uuid

from arena.config import AUTO_LOGIN_TTL_SECONDS

PUBLIC_USER_FIELDS = {"_id": 0, "id": 1, "username": 1, "email": 1, "prn": 1}


class AutoLoginError(Exception):
    pass


async def find_user_by_credentials(db: AsyncIOMotorDatabase, prn: str, password: str) -> Optional[dict]:
    return await db.users.find_one({"prn": prn, "password": password}, PUBLIC_USER_FIELDS)


async def find_user(db: AsyncIOMotorDatabase, user_id: str) -> Optional[dict]:
    return await db.users.find_one({"id": user_id}, PUBLIC_USER_FIELDS)

# ==================== ONE-TIME LOGIN TOKENS ====================

async def create_auto_login_token(db: AsyncIOMotorDatabase, user_id: str) -> str:
    token = str(uuid.uuid4())
    await db.auto_login_tokens.insert_one({
        "token": token,
        "user_id": user_id,
        "expires_at": datetime.utcnow() + timedelta(seconds=AUTO_LOGIN_TTL_SECONDS),
        "used": False,
        "created_at": datetime.utcnow(),
    })
    return token


async def redeem_auto_login_token(db: AsyncIOMotorDatabase, token: str) -> dict:
    """Validate a one-time token, burn it, return the user"""
    record = await db.auto_login_tokens.find_one({"token": token})
    if not record:
        raise AutoLoginError("Invalid or expired auto-login token")

    if datetime.utcnow() > record["expires_at"]:
        raise AutoLoginError("Auto-login token has expired")

    if record.get("used"):
        raise AutoLoginError("Auto-login token has already been used")

    # Conditional update so two concurrent redeems cannot both succeed
    result = await db.auto_login_tokens.update_one(
        {"token": token, "used": False},
        {"$set": {"used": True, "used_at": datetime.utcnow()}}
    )
    if result.modified_count == 0:
        raise AutoLoginError("Auto-login token has already been used")

    user = await find_user(db, record["user_id"])
    if not user:
        raise AutoLoginError("User account not found")
    return user
