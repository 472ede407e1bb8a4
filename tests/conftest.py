import io
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = str(Path(__file__).resolve().parent.parent)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from filetimefixer import EntryProcessor, MemoryConnector, Reporter, RunStatistics, TreeWalker  # noqa: E402


class Run:
    """Processor and walker over a memory connector, reporting into a buffer."""

    def __init__(self, connector: MemoryConnector, simulate: bool = False):
        self.connector = connector
        self.stats = RunStatistics()
        self.output = io.StringIO()
        self.processor = EntryProcessor(connector, self.stats, Reporter(self.output), simulate=simulate)
        self.walker = TreeWalker(connector, self.processor)

    @property
    def lines(self):
        return self.output.getvalue().splitlines()


@pytest.fixture
def connector():
    return MemoryConnector()


@pytest.fixture
def make_run():
    def make(connector, simulate=False):
        return Run(connector, simulate=simulate)
    return make
