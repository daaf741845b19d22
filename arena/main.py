import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from motor.motor_asyncio import AsyncIOMotorClient

from arena.config import MONGO_URL, MONGO_DB_NAME, LOG_LEVEL, VERSION
from arena.auth.router import router as auth_router
from arena.editor.router import router as editor_router
from arena.learning.router import router as learning_router
from arena.profile.router import router as profile_router
from arena.progress.router import router as progress_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Arena Practice Service")

# MongoDB Configuration
client = AsyncIOMotorClient(MONGO_URL)
db = client[MONGO_DB_NAME]


async def create_indexes():
    await db.user_progress.create_index([("user_id", 1), ("question_id", 1)], unique=True)
    await db.user_code.create_index([("user_id", 1), ("question_id", 1), ("language", 1)], unique=True)
    await db.auto_login_tokens.create_index("token", unique=True)
    await db.users.create_index("prn")
    await db.test_cases.create_index("question_id")


@app.on_event("startup")
async def startup_event():
    await create_indexes()
    logger.info("[STARTUP] indexes ready on %s", MONGO_DB_NAME)


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ==================== ROUTER REGISTRATION ====================
app.include_router(auth_router, prefix="/auth")
app.include_router(learning_router, prefix="/learning")
app.include_router(progress_router, prefix="/progress")
app.include_router(editor_router, prefix="/editor")
app.include_router(profile_router, prefix="/profile")
# ============================================================


@app.get("/version")
def get_version():
    return {"version": VERSION or "unknown", "status": "stable"}


@app.get("/health")
def health():
    return {"status": "ok"}
