from contextlib import contextmanager


class RunInProgressError(Exception):
    pass


class RunGuard:
    """
    Rejects a second run for the same (user, question) while one is in flight.
    In-process only; each worker keeps its own set.
    """

    def __init__(self):
        self._active = set()

    def is_running(self, user_id: str, question_id: str) -> bool:
        return (user_id, question_id) in self._active

    @contextmanager
    def hold(self, user_id: str, question_id: str):
        key = (user_id, question_id)
        if key in self._active:
            raise RunInProgressError("A run for this question is already in progress")
        self._active.add(key)
        try:
            yield
        finally:
            self._active.discard(key)


run_guard = RunGuard()
