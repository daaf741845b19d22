"""
Judge run errors.

Every error here is terminal for the current run: remaining test cases are
skipped, collected outcomes are dropped and a single message reaches the user.
"""


class JudgeError(Exception):
    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(JudgeError):
    http_status = 400


class UnsupportedLanguageError(JudgeError):
    http_status = 400


class SubmissionError(JudgeError):
    http_status = 502


class PollError(JudgeError):
    http_status = 502


class ExecutionTimeoutError(JudgeError):
    http_status = 504


class AggregationError(JudgeError):
    http_status = 502
