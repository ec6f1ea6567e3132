from ..config import DEBUG_EXECUTION
import time


class Timer:
    """Prints the wall time of a block when DEBUG_EXECUTION is on."""

    def __init__(self, name="Elapsed"):
        self.name = name
        self.elapsed = 0.0
        if DEBUG_EXECUTION:
            self.start = time.perf_counter()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if not DEBUG_EXECUTION:
            return
        self.elapsed = time.perf_counter() - self.start
        print(f"{self.name}: {self.elapsed * 1e3:.3f} ms")
