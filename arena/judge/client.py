import asyncio
import logging
from dataclasses import dataclass

import httpx

from arena.config import (
    JUDGE_API_URL, JUDGE_API_KEY,
    JUDGE_POLL_INTERVAL_SECONDS, JUDGE_MAX_POLL_ATTEMPTS,
)
from arena.judge.errors import (
    SubmissionError, PollError, ExecutionTimeoutError, AggregationError
)
from arena.judge.languages import resolve_language_id
from arena.judge.status import JudgeStatus

logger = logging.getLogger(__name__)


@dataclass
class JudgeVerdict:
    token: str
    status_id: int
    stdout: str

    @property
    def accepted(self) -> bool:
        return JudgeStatus.is_accepted(self.status_id)


class JudgeClient:
    """
    Submit/poll client for a Judge0-style execution service.

    One test case is one judge submission. `run_test_case` drives it from
    creation to a finished status and is the unit the orchestrator calls in
    sequence.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str = JUDGE_API_URL,
        api_key: str = JUDGE_API_KEY,
        poll_interval: float = JUDGE_POLL_INTERVAL_SECONDS,
        max_attempts: int = JUDGE_MAX_POLL_ATTEMPTS,
    ):
        self.http = http_client
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["X-Auth-Token"] = self.api_key
        return headers

    # ==================== SUBMIT ====================

    async def submit(self, source_code: str, language_id: int, stdin: str, expected_output: str) -> str:
        """Create a submission and return its token"""
        try:
            response = await self.http.post(
                f"{self.base_url}/submissions",
                json={
                    "source_code": source_code,
                    "language_id": language_id,
                    "stdin": stdin,
                    "expected_output": expected_output,
                },
                headers=self._headers(),
            )
        except httpx.RequestError as e:
            raise SubmissionError(f"Submission failed: {e}")

        if not response.is_success:
            raise SubmissionError(f"Submission failed: {response.reason_phrase or response.status_code}")

        try:
            data = response.json()
        except ValueError:
            raise AggregationError("Judge returned a non-JSON submission response")

        token = data.get("token") if isinstance(data, dict) else None
        if not token:
            raise AggregationError("Judge response did not include a submission token")
        return token

    # ==================== STATUS ====================

    async def fetch_status(self, token: str) -> dict:
        try:
            response = await self.http.get(
                f"{self.base_url}/submissions/{token}",
                headers=self._headers(),
            )
        except httpx.RequestError as e:
            raise PollError(f"Status check failed: {e}")

        if not response.is_success:
            raise PollError(f"Status check failed: {response.reason_phrase or response.status_code}")

        try:
            data = response.json()
        except ValueError:
            raise AggregationError("Judge returned a non-JSON status response")
        if not isinstance(data, dict):
            raise AggregationError("Judge returned a malformed status response")
        return data

    @staticmethod
    def _status_id(payload: dict) -> int:
        status = payload.get("status")
        status_id = status.get("id") if isinstance(status, dict) else None
        if isinstance(status_id, bool) or not isinstance(status_id, int):
            raise AggregationError("Judge status response is missing status.id")
        return status_id

    async def wait_for_result(self, token: str) -> JudgeVerdict:
        """Poll until the judge reports a finished status or the attempt budget runs out"""
        payload = None
        status_id = None

        for attempt in range(self.max_attempts):
            await asyncio.sleep(self.poll_interval)

            payload = await self.fetch_status(token)
            status_id = self._status_id(payload)

            if JudgeStatus.is_finished(status_id):
                break

            logger.debug("[JUDGE] token=%s attempt=%d still %s", token, attempt + 1, JudgeStatus.label(status_id))

        if status_id is None or not JudgeStatus.is_finished(status_id):
            raise ExecutionTimeoutError("Execution timed out")

        stdout = payload.get("stdout")
        if stdout is not None and not isinstance(stdout, str):
            raise AggregationError("Judge status response has a malformed stdout")
        stdout = stdout or ""
        return JudgeVerdict(token=token, status_id=status_id, stdout=stdout)

    # ==================== TEST CASE ====================

    async def run_test_case(self, source_code: str, language, test_case) -> JudgeVerdict:
        language_id = resolve_language_id(language)
        token = await self.submit(
            source_code,
            language_id,
            stdin=test_case.input,
            expected_output=test_case.expected_output,
        )
        logger.info("[JUDGE] test case %s submitted, token=%s", test_case.id, token)

        verdict = await self.wait_for_result(token)
        logger.info("[JUDGE] token=%s finished with %s", token, JudgeStatus.label(verdict.status_id))
        return verdict
