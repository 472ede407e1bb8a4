import sys
from typing import IO, Optional

from tqdm.auto import tqdm

from filetimefixer.stats import ErrorKind, RunStatistics

ERROR_MESSAGES = {
    ErrorKind.OPEN_FOR_READ_FAILED: 'Error opening file: {path} (error {code})',
    ErrorKind.TIMESTAMP_READ_FAILED: 'Error getting file times for file: {path} (error {code})',
    ErrorKind.OPEN_FOR_WRITE_FAILED: 'Error opening file with write access: {path} (error {code})',
    ErrorKind.TIMESTAMP_WRITE_FAILED: '{path} ... error! (error {code})',
    ErrorKind.ENUMERATION_START_FAILED: 'Error finding files in directory: {path} (error {code})',
    ErrorKind.ENUMERATION_STEP_FAILED: 'Directory listing error ({code}) for directory: {path}',
}


def error_code(err: OSError) -> Optional[int]:
    """Platform error code of an OSError.

    Parameters
    ----------
    err : OSError
        Raised error.

    Returns
    -------
    Optional[int]
        ``winerror`` when set, ``errno`` otherwise.
    """
    winerror = getattr(err, 'winerror', None)
    return winerror if winerror is not None else err.errno


class Reporter:
    """Console sink for per-entry outcomes.

    Lines go through ``tqdm.write`` so they do not tear the progress bar.

    Attributes
    ----------
    stream : IO[str]
        Output text stream.
    pbar : Optional[tqdm]
        Progress counter of examined entries, if enabled.
    """

    def __init__(self, stream: Optional[IO[str]] = None, progress: bool = False):
        self.stream = stream if stream is not None else sys.stdout
        self.pbar = tqdm(desc='Entries', unit=' entries', leave=False, file=sys.stderr) if progress else None

    def line(self, text: str) -> None:
        tqdm.write(text, file=self.stream)

    def advance(self) -> None:
        if self.pbar is not None:
            self.pbar.update(1)

    def would_repair(self, path: str) -> None:
        self.line(f'Would be repaired: {path}')

    def repaired(self, path: str) -> None:
        self.line(f'{path} ... done.')

    def error(self, kind: ErrorKind, path: str, code: Optional[int]) -> None:
        self.line(ERROR_MESSAGES[kind].format(path=path, code=code))

    def summary(self, stats: RunStatistics, simulate: bool, elapsed: float) -> None:
        """Print final statistics.

        Parameters
        ----------
        stats : RunStatistics
            Counters of the finished run.
        simulate : bool
            Run was a simulation.
        elapsed : float
            Walk duration in seconds.
        """
        repaired = 'Would be repaired' if simulate else 'Repaired'
        self.line('')
        self.line(f'Files examined:       {stats.files_examined}')
        self.line(f'Directories examined: {stats.dirs_examined}')
        self.line(f'{repaired} files: {stats.files_repaired}')
        self.line(f'{repaired} directories: {stats.dirs_repaired}')
        self.line(f'Errors: {len(stats.errors)}')
        self.line(f'Elapsed time: {format_duration(elapsed)}')
        if simulate:
            self.line('This was a simulation. No timestamps were modified.')

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None


def format_duration(seconds: float) -> str:
    if seconds < 1:
        return f'{seconds * 1000:.0f} ms'
    if seconds < 60:
        return f'{seconds:.2f} s'
    minutes, seconds = divmod(seconds, 60)
    if minutes < 60:
        return f'{int(minutes)} min {seconds:.0f} s'
    hours, minutes = divmod(minutes, 60)
    return f'{int(hours)} h {int(minutes)} min'
