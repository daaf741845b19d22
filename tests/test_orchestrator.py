import asyncio

import pytest

from arena.editor.models import HIDDEN_MARKER, RunMode, TestCase
from arena.editor.orchestrator import SubmissionOrchestrator, select_test_cases
from arena.judge.errors import (
    AggregationError, ExecutionTimeoutError, SubmissionError, UnsupportedLanguageError,
    ValidationError,
)

from conftest import FakeJudgeServer, finished, make_judge_client

SUM_CODE = "a, b = map(int, input().split())\nprint(a + b)\n"


class FakeRecorder:
    def __init__(self):
        self.completed = []

    async def mark_completed(self, user_id, question_id):
        self.completed.append((user_id, question_id))


def two_cases():
    return [
        TestCase(id="1", input="3 4", expected_output="7", points=50, visible=True),
        TestCase(id="2", input="-1 5", expected_output="4", points=50, visible=False),
    ]


def execute(server, test_cases, mode, recorder=None, code=SUM_CODE, language="python"):
    orchestrator = SubmissionOrchestrator(make_judge_client(server), recorder)
    return asyncio.run(orchestrator.execute(
        code, language, test_cases, mode, user_id="user-1", question_id="q-1"
    ))


class TestSubmitScoring:
    def test_two_case_sum_scenario(self):
        server = FakeJudgeServer([[finished(3, "7\n")], [finished(3, "4\n")]])
        recorder = FakeRecorder()

        result = execute(server, two_cases(), RunMode.SUBMIT, recorder)

        assert [o.passed for o in result.outcomes] == [True, True]
        assert [o.points_awarded for o in result.outcomes] == [50, 50]
        assert result.total_score == 100
        assert result.max_score == 100
        assert result.is_success
        assert result.completed
        assert recorder.completed == [("user-1", "q-1")]

    def test_failed_case_awards_nothing_and_skips_progress(self):
        server = FakeJudgeServer([[finished(3, "7\n")], [finished(4, "6\n")]])
        recorder = FakeRecorder()

        result = execute(server, two_cases(), RunMode.SUBMIT, recorder)

        assert [o.points_awarded for o in result.outcomes] == [50, 0]
        assert result.total_score == 50
        assert result.max_score == 100
        assert not result.completed
        assert not result.is_success
        assert recorder.completed == []

    def test_any_finished_non_accepted_status_fails(self):
        cases = [TestCase(id=str(i), input="", expected_output="", points=10, visible=True) for i in range(3)]
        server = FakeJudgeServer([[finished(5)], [finished(6)], [finished(11)]])

        result = execute(server, cases, RunMode.SUBMIT)

        assert all(not o.passed for o in result.outcomes)
        assert result.total_score == 0

    def test_outcomes_follow_input_order(self):
        cases = [TestCase(id=f"tc-{i}", input=str(i), expected_output=str(i), points=1, visible=True) for i in range(4)]
        server = FakeJudgeServer([[finished(3, str(i))] for i in range(4)])

        result = execute(server, cases, RunMode.SUBMIT)

        assert [o.test_case_id for o in result.outcomes] == ["tc-0", "tc-1", "tc-2", "tc-3"]
        assert [s["stdin"] for s in server.submissions] == ["0", "1", "2", "3"]

    def test_actual_output_is_trimmed(self):
        server = FakeJudgeServer([[finished(3, "  7 \n\n")]])
        result = execute(server, two_cases()[:1], RunMode.SUBMIT)
        assert result.outcomes[0].actual_output == "7"


class TestRedaction:
    def test_hidden_passed_case_hides_everything(self):
        server = FakeJudgeServer([[finished(3, "7\n")], [finished(3, "4\n")]])
        hidden = execute(server, two_cases(), RunMode.SUBMIT).outcomes[1]

        assert hidden.input == HIDDEN_MARKER
        assert hidden.expected_output == HIDDEN_MARKER
        assert hidden.actual_output is None

    def test_hidden_failed_case_shows_own_output(self):
        server = FakeJudgeServer([[finished(3, "7\n")], [finished(4, "6\n")]])
        hidden = execute(server, two_cases(), RunMode.SUBMIT).outcomes[1]

        assert hidden.input == HIDDEN_MARKER
        assert hidden.expected_output == HIDDEN_MARKER
        assert hidden.actual_output == "6"

    def test_visible_case_is_not_redacted(self):
        server = FakeJudgeServer([[finished(3, "7\n")], [finished(3, "4\n")]])
        visible = execute(server, two_cases(), RunMode.SUBMIT).outcomes[0]

        assert visible.input == "3 4"
        assert visible.expected_output == "7"
        assert visible.actual_output == "7"


class TestRunMode:
    def test_only_visible_cases_are_judged(self):
        server = FakeJudgeServer([[finished(3, "7\n")]])
        recorder = FakeRecorder()

        result = execute(server, two_cases(), RunMode.RUN, recorder)

        assert len(server.submissions) == 1
        assert [o.test_case_id for o in result.outcomes] == ["1"]
        assert result.total_score == 50
        assert result.max_score == 50

    def test_run_never_records_progress(self):
        server = FakeJudgeServer([[finished(3, "7\n")]])
        recorder = FakeRecorder()

        result = execute(server, two_cases(), RunMode.RUN, recorder)

        assert not result.completed
        assert recorder.completed == []

    def test_no_visible_cases(self):
        hidden_only = [two_cases()[1]]
        with pytest.raises(ValidationError, match="No visible test cases"):
            execute(FakeJudgeServer(), hidden_only, RunMode.RUN)

    def test_select_test_cases(self):
        cases = two_cases()
        assert select_test_cases(cases, RunMode.RUN) == cases[:1]
        assert select_test_cases(cases, RunMode.SUBMIT) == cases


class TestAborts:
    @pytest.mark.parametrize("code", ["", "   \n\t"])
    def test_blank_code_makes_no_network_call(self, code):
        server = FakeJudgeServer([[finished(3)]])
        with pytest.raises(ValidationError):
            execute(server, two_cases(), RunMode.SUBMIT, code=code)
        assert server.submissions == []

    def test_unsupported_language(self):
        server = FakeJudgeServer([[finished(3)]])
        with pytest.raises(UnsupportedLanguageError):
            execute(server, two_cases(), RunMode.SUBMIT, language="cobol")
        assert server.submissions == []

    def test_timeout_aborts_run_without_progress(self):
        server = FakeJudgeServer([[finished(3, "7\n")], [finished(1)]])
        recorder = FakeRecorder()

        with pytest.raises(ExecutionTimeoutError):
            execute(server, two_cases(), RunMode.SUBMIT, recorder)

        assert recorder.completed == []
        assert server.polls.count("tok-2") == 10

    def test_failure_stops_remaining_cases(self):
        cases = two_cases() + [TestCase(id="3", input="1 1", expected_output="2", points=10, visible=True)]
        server = FakeJudgeServer([[finished(3, "7\n")], [finished(2)], [finished(3, "2")]])

        with pytest.raises(ExecutionTimeoutError):
            execute(server, cases, RunMode.SUBMIT)
        assert len(server.submissions) == 2

    def test_submission_error_propagates(self):
        server = FakeJudgeServer([[finished(3)]], submit_status=500)
        recorder = FakeRecorder()

        with pytest.raises(SubmissionError):
            execute(server, two_cases(), RunMode.SUBMIT, recorder)
        assert recorder.completed == []

    def test_malformed_stdout_aborts_without_progress(self):
        server = FakeJudgeServer([[{"status": {"id": 3}, "stdout": 7}]])
        recorder = FakeRecorder()

        with pytest.raises(AggregationError):
            execute(server, two_cases(), RunMode.SUBMIT, recorder)
        assert recorder.completed == []

    def test_submit_with_no_test_cases_is_not_completed(self):
        server = FakeJudgeServer([[finished(3)]])
        recorder = FakeRecorder()

        with pytest.raises(ValidationError, match="No test cases found"):
            execute(server, [], RunMode.SUBMIT, recorder)
        assert recorder.completed == []
        assert server.submissions == []
