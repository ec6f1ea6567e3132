import atexit
from dataclasses import dataclass, field
from typing import IO, ClassVar, Optional

from .. import config


class OutputStream:
    """Optional persistent report file."""

    def __init__(self, path: Optional[str] = None):
        self._file: Optional[IO[str]] = None
        self.path = None
        if path:
            self.open(path)

    def open(self, path: str, mode: str = "a"):
        self.close()
        self._file = open(path, mode)
        self.path = path

    def is_open(self) -> bool:
        return self._file is not None and not self._file.closed

    def fstream(self) -> Optional[IO[str]]:
        return self._file if self.is_open() else None

    def close(self):
        if self._file is not None:
            self._file.close()
        self._file = None


@dataclass(frozen=True)
class HarnessOptions:
    omit_cout: bool = False
    omit_skipped: bool = False
    omit_failed: bool = False
    omit_passed: bool = False
    ostream: OutputStream = field(default_factory=OutputStream)

    _instance: ClassVar[Optional["HarnessOptions"]] = None

    @classmethod
    def instance(cls) -> "HarnessOptions":
        """Process-wide options; the report file is closed at exit."""
        if cls._instance is None:
            cls._instance = cls.from_config()
            atexit.register(cls.release)
        return cls._instance

    @classmethod
    def release(cls):
        if cls._instance is not None:
            cls._instance.ostream.close()
        cls._instance = None

    @classmethod
    def from_config(cls) -> "HarnessOptions":
        return cls(
            omit_cout=config.OMIT_COUT,
            omit_skipped=config.OMIT_SKIPPED,
            omit_failed=config.OMIT_FAILED,
            omit_passed=config.OMIT_PASSED,
            ostream=OutputStream(config.OUTPUT_FILE),
        )
