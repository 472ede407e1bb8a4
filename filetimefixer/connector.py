from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Iterator

from filetimefixer.utils.entry import FSEntry, FileTimes


class EntryHandle(ABC):
    """Abstract class for an open file or directory handle."""

    @abstractmethod
    def get_times(self) -> FileTimes:
        """Read creation and modification times.

        Returns
        -------
        FileTimes
            Timestamps in the backend's native unit.

        Raises
        ------
        OSError
            If the timestamps cannot be retrieved.
        """
        pass

    @abstractmethod
    def set_times(self, creation: int, modification: int) -> None:
        """Write creation and modification times.

        Parameters
        ----------
        creation : int
            New creation time.
        modification : int
            New modification time. Callers pass the current value to leave it untouched.

        Raises
        ------
        OSError
            If the timestamps cannot be written.
        """
        pass


class Connector(ABC):
    """Abstract class for connector."""

    @abstractmethod
    def open(self, path: str, is_file: bool, mode: str = 'r') -> AbstractContextManager[EntryHandle]:
        """Open file or directory for metadata access.

        Parameters
        ----------
        path : str
            Entry path.
        is_file : bool
            Open with file semantics if True, directory semantics otherwise.
        mode : str, default='r'
            'r' for read access, 'w' for write access.

        Returns
        -------
        AbstractContextManager[EntryHandle]
            Context manager yielding the open handle and releasing it on exit.

        Raises
        ------
        OSError
            If the entry cannot be opened with the requested access.
        """
        pass

    @abstractmethod
    def scandir(self, path: str) -> AbstractContextManager[Iterator[FSEntry]]:
        """List immediate directory children.

        The iterator yields the '.' and '..' pseudo-entries first, followed by
        the real children in the backend's enumeration order.

        Parameters
        ----------
        path : str
            Directory path.

        Returns
        -------
        AbstractContextManager[Iterator[FSEntry]]
            Context manager yielding the entry iterator and releasing the listing on exit.

        Raises
        ------
        OSError
            On entering if the listing cannot start, on iteration if it fails midway.
        """
        pass

