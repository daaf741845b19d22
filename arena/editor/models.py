from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from enum import Enum

from arena.judge.languages import Language

HIDDEN_MARKER = "Hidden"

# ==================== ENUMS ====================

class RunMode(str, Enum):
    RUN = "run"        # visible test cases, no side effects
    SUBMIT = "submit"  # full test set, may mark the question completed

# ==================== TEST CASE MODELS ====================

class TestCase(BaseModel):
    __test__ = False

    id: str
    input: str = ""
    expected_output: str = ""
    visible: bool = False
    points: int = Field(0, ge=0)

    @classmethod
    def from_document(cls, doc: dict) -> "TestCase":
        return cls(
            id=str(doc.get("id") or doc.get("_id")),
            input=doc.get("input") or "",
            expected_output=doc.get("expected") or doc.get("expected_output") or "",
            visible=bool(doc.get("visible", False)),
            points=doc.get("points") or 0,
        )

# ==================== RESULT MODELS ====================

class SubmissionOutcome(BaseModel):
    test_case_id: str
    passed: bool
    input: str
    expected_output: str
    actual_output: Optional[str] = None
    points_awarded: int = 0


class RunResult(BaseModel):
    mode: RunMode
    outcomes: List[SubmissionOutcome] = []
    total_score: int = 0
    max_score: int = 0
    is_success: bool = False
    completed: bool = False

# ==================== REQUEST MODELS ====================

class CodeRequest(BaseModel):
    language: str = Language.CPP.value
    code: str

    @field_validator("language")
    @classmethod
    def normalize_language(cls, v):
        return v.strip().lower()

    @field_validator("code")
    @classmethod
    def validate_size(cls, v):
        if len(v.encode("utf-8")) > 100 * 1024:  # 100KB
            raise ValueError("Source code too large (max 100KB)")
        return v
