from filetimefixer.cli import CLI
from filetimefixer.config import FixerConfig
from filetimefixer.connector import Connector, EntryHandle
from filetimefixer.fixer import EntryProcessor, TreeWalker
from filetimefixer.local import LocalConnector
from filetimefixer.memory import MemoryConnector
from filetimefixer.report import Reporter
from filetimefixer.stats import ErrorKind, ReportedError, RunStatistics
from filetimefixer.utils.entry import FSEntry, FileTimes

__all__ = [
    'CLI',
    'Connector',
    'EntryHandle',
    'EntryProcessor',
    'ErrorKind',
    'FSEntry',
    'FileTimes',
    'FixerConfig',
    'LocalConnector',
    'MemoryConnector',
    'ReportedError',
    'Reporter',
    'RunStatistics',
    'TreeWalker',
]
