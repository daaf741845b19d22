"""
Submission orchestration for the practice editor.

A run walks its test cases one at a time through the judge, in the order
given, and folds the verdicts into a RunResult. Any judge error aborts the
whole run; nothing collected so far is returned and no progress is written.
"""

import logging
from typing import List, Optional

from arena.editor.models import (
    HIDDEN_MARKER, RunMode, RunResult, SubmissionOutcome, TestCase
)
from arena.judge.client import JudgeClient
from arena.judge.errors import JudgeError, ValidationError

logger = logging.getLogger(__name__)


def select_test_cases(test_cases: List[TestCase], mode: RunMode) -> List[TestCase]:
    """Run uses only visible cases, Submit uses the full set"""
    if mode == RunMode.RUN:
        return [tc for tc in test_cases if tc.visible]
    return list(test_cases)


def build_outcome(test_case: TestCase, passed: bool, actual_output: str, mode: RunMode) -> SubmissionOutcome:
    outcome = SubmissionOutcome(
        test_case_id=test_case.id,
        passed=passed,
        input=test_case.input,
        expected_output=test_case.expected_output,
        actual_output=actual_output,
        points_awarded=test_case.points if passed else 0,
    )

    # Hidden cases never leak their data; own output is shown only on failure
    if mode == RunMode.SUBMIT and not test_case.visible:
        outcome.input = HIDDEN_MARKER
        outcome.expected_output = HIDDEN_MARKER
        if passed:
            outcome.actual_output = None

    return outcome


class SubmissionOrchestrator:

    def __init__(self, judge: JudgeClient, recorder=None):
        self.judge = judge
        self.recorder = recorder

    async def execute(
        self,
        source_code: str,
        language: str,
        test_cases: List[TestCase],
        mode: RunMode,
        user_id: Optional[str] = None,
        question_id: Optional[str] = None,
    ) -> RunResult:
        mode = RunMode(mode)

        if not source_code or not source_code.strip():
            verb = "running" if mode == RunMode.RUN else "submitting"
            raise ValidationError(f"Please write some code before {verb}")

        selected = select_test_cases(test_cases, mode)
        # an empty submit set is rejected rather than scored 0/0 and marked completed
        if not selected:
            raise ValidationError(
                "No visible test cases found" if mode == RunMode.RUN else "No test cases found"
            )

        logger.info(
            "[RUN] %s started: question=%s language=%s cases=%d",
            mode.value, question_id, language, len(selected)
        )

        outcomes = []
        try:
            for test_case in selected:
                verdict = await self.judge.run_test_case(source_code, language, test_case)
                outcome = build_outcome(test_case, verdict.accepted, verdict.stdout.strip(), mode)
                outcomes.append(outcome)
        except JudgeError as e:
            logger.warning(
                "[RUN] %s aborted after %d/%d cases: %s",
                mode.value, len(outcomes), len(selected), e.message
            )
            raise

        total_score = sum(o.points_awarded for o in outcomes if o.passed)
        max_score = sum(tc.points for tc in selected)

        result = RunResult(
            mode=mode,
            outcomes=outcomes,
            total_score=total_score,
            max_score=max_score,
            is_success=all(o.passed for o in outcomes) and total_score == max_score,
        )

        if mode == RunMode.SUBMIT and total_score == max_score:
            if self.recorder is not None and user_id and question_id:
                await self.recorder.mark_completed(user_id, question_id)
            result.completed = True

        logger.info(
            "[RUN] %s finished: question=%s score=%d/%d completed=%s",
            mode.value, question_id, total_score, max_score, result.completed
        )
        return result
