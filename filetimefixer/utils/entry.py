from dataclasses import dataclass
from typing import Literal

SELF_NAME = '.'
PARENT_NAME = '..'


@dataclass
class FSEntry:
    name: str
    path: str
    type: Literal['file', 'dir']

    @property
    def is_pseudo(self) -> bool:
        return self.name in (SELF_NAME, PARENT_NAME)


@dataclass(frozen=True)
class FileTimes:
    creation: int
    modification: int
