import logging
from contextlib import ExitStack
from typing import Optional

from filetimefixer.connector import Connector
from filetimefixer.report import Reporter, error_code
from filetimefixer.stats import ErrorKind, RunStatistics
from filetimefixer.utils.entry import FileTimes, SELF_NAME

logger = logging.getLogger(__name__)


class EntryProcessor:
    """Repairs the creation time of a single file or directory.

    Attributes
    ----------
    connector : Connector
        File system connector.
    stats : RunStatistics
        Counters updated on every call.
    reporter : Reporter
        Console sink.
    simulate : bool
        Report qualifying entries without writing.
    """

    def __init__(
        self,
        connector: Connector,
        stats: RunStatistics,
        reporter: Reporter,
        simulate: bool = False
    ):
        self.connector = connector
        self.stats = stats
        self.reporter = reporter
        self.simulate = simulate

    def process_entry(self, path: str, is_file: bool) -> None:
        """Set creation time to modification time if creation is later.

        Errors are reported and end processing of this entry only.

        Parameters
        ----------
        path : str
            Entry path.
        is_file : bool
            Entry is a file if True, a directory otherwise.
        """
        self.stats.examined(is_file)
        self.reporter.advance()

        times = self._read_times(path, is_file)
        if times is None:
            return
        if times.creation <= times.modification:
            logger.debug('%s: creation time %d is not later than modification time %d',
                         path, times.creation, times.modification)
            return

        if self.simulate:
            self.reporter.would_repair(path)
            self.stats.repaired(is_file)
            return

        if self._write_creation_time(path, is_file, times):
            self.stats.repaired(is_file)
            self.reporter.repaired(path)

    def _read_times(self, path: str, is_file: bool) -> Optional[FileTimes]:
        with ExitStack() as stack:
            try:
                handle = stack.enter_context(self.connector.open(path, is_file, 'r'))
            except OSError as err:
                self.report_error(ErrorKind.OPEN_FOR_READ_FAILED, path, err)
                return None
            try:
                return handle.get_times()
            except OSError as err:
                self.report_error(ErrorKind.TIMESTAMP_READ_FAILED, path, err)
                return None

    def _write_creation_time(self, path: str, is_file: bool, times: FileTimes) -> bool:
        with ExitStack() as stack:
            try:
                handle = stack.enter_context(self.connector.open(path, is_file, 'w'))
            except OSError as err:
                self.report_error(ErrorKind.OPEN_FOR_WRITE_FAILED, path, err)
                return False
            try:
                handle.set_times(times.modification, times.modification)
            except OSError as err:
                self.report_error(ErrorKind.TIMESTAMP_WRITE_FAILED, path, err)
                return False
        logger.debug('%s: creation time %d set to %d', path, times.creation, times.modification)
        return True

    def report_error(self, kind: ErrorKind, path: str, err: OSError) -> None:
        code = error_code(err)
        logger.debug('%s: %s: %s', path, kind.value, err)
        self.stats.error(kind, path, code)
        self.reporter.error(kind, path, code)


class TreeWalker:
    """Pre-order depth-first walk feeding an entry processor.

    Attributes
    ----------
    connector : Connector
        File system connector.
    processor : EntryProcessor
        Processor of every visited file and directory.
    """

    def __init__(self, connector: Connector, processor: EntryProcessor):
        self.connector = connector
        self.processor = processor

    def walk(self, directory_path: str) -> None:
        """Process a directory, its files and its subdirectories recursively.

        The directory itself is processed when the '.' pseudo-entry comes up
        in the listing. Listing errors are reported and end this directory only.

        Parameters
        ----------
        directory_path : str
            Directory path.
        """
        with ExitStack() as stack:
            try:
                entries = stack.enter_context(self.connector.scandir(directory_path))
            except OSError as err:
                self.processor.report_error(ErrorKind.ENUMERATION_START_FAILED, directory_path, err)
                return
            while True:
                try:
                    entry = next(entries)
                except StopIteration:
                    break
                except OSError as err:
                    self.processor.report_error(ErrorKind.ENUMERATION_STEP_FAILED, directory_path, err)
                    break
                if entry.name == SELF_NAME:
                    self.processor.process_entry(directory_path, is_file=False)
                if entry.is_pseudo:
                    continue
                if entry.type == 'dir':
                    self.walk(entry.path)
                else:
                    self.processor.process_entry(entry.path, is_file=True)
