from enum import IntEnum


class JudgeStatus(IntEnum):
    """
    Judge0 submission status ids.

    Anything above PROCESSING is a finished run; only ACCEPTED counts as a
    pass. The other finished values are listed for logging, they are all
    scored as a failure.
    """
    IN_QUEUE = 1
    PROCESSING = 2
    ACCEPTED = 3
    WRONG_ANSWER = 4
    TIME_LIMIT_EXCEEDED = 5
    COMPILATION_ERROR = 6
    RUNTIME_ERROR_SIGSEGV = 7
    RUNTIME_ERROR_SIGXFSZ = 8
    RUNTIME_ERROR_SIGFPE = 9
    RUNTIME_ERROR_SIGABRT = 10
    RUNTIME_ERROR_NZEC = 11
    RUNTIME_ERROR_OTHER = 12
    INTERNAL_ERROR = 13
    EXEC_FORMAT_ERROR = 14

    @staticmethod
    def is_finished(status_id: int) -> bool:
        return status_id > JudgeStatus.PROCESSING

    @staticmethod
    def is_accepted(status_id: int) -> bool:
        return status_id == JudgeStatus.ACCEPTED

    @staticmethod
    def label(status_id: int) -> str:
        try:
            return JudgeStatus(status_id).name
        except ValueError:
            return f"UNKNOWN_{status_id}"
