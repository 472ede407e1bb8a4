from enum import Enum
from dataclasses import dataclass, field
from typing import List, Optional


class ErrorKind(Enum):
    OPEN_FOR_READ_FAILED = 'open for read failed'
    TIMESTAMP_READ_FAILED = 'timestamp read failed'
    OPEN_FOR_WRITE_FAILED = 'open for write failed'
    TIMESTAMP_WRITE_FAILED = 'timestamp write failed'
    ENUMERATION_START_FAILED = 'enumeration start failed'
    ENUMERATION_STEP_FAILED = 'enumeration step failed'


@dataclass
class ReportedError:
    kind: ErrorKind
    path: str
    code: Optional[int]


@dataclass
class RunStatistics:
    """Counters of one run.

    Attributes
    ----------
    files_examined : int
        Entry processor invocations for files.
    dirs_examined : int
        Entry processor invocations for directories.
    files_repaired : int
        Files whose creation time was (or in simulation mode would be) rewritten.
    dirs_repaired : int
        Directories whose creation time was (or in simulation mode would be) rewritten.
    errors : list[ReportedError]
        Per-entry and per-directory errors, in the order they were reported.
    """

    files_examined: int = 0
    dirs_examined: int = 0
    files_repaired: int = 0
    dirs_repaired: int = 0
    errors: List[ReportedError] = field(default_factory=list)

    def examined(self, is_file: bool) -> None:
        if is_file:
            self.files_examined += 1
        else:
            self.dirs_examined += 1

    def repaired(self, is_file: bool) -> None:
        if is_file:
            self.files_repaired += 1
        else:
            self.dirs_repaired += 1

    def error(self, kind: ErrorKind, path: str, code: Optional[int]) -> None:
        self.errors.append(ReportedError(kind, path, code))
