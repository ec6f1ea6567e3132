import io

from ..config import DEBUG_EXECUTION


class ApiLogBuffer:
    """
    In-memory sink for engine log lines of the current case.

    Passed to the engine when its handle is created; the engine writes,
    the reporter reads. Not shared between concurrently running cases.
    """

    def __init__(self):
        self._buffer = io.StringIO()

    def __call__(self, level, func_name: str, message: str) -> None:
        if DEBUG_EXECUTION:
            print(f"[ApiLogBuffer] {func_name}: {message.rstrip()}")
        self._buffer.write(message)

    def clear(self) -> None:
        self._buffer = io.StringIO()

    def getvalue(self) -> str:
        return self._buffer.getvalue()
