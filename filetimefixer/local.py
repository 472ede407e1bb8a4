import os
import errno
from typing import Iterator
from contextlib import contextmanager

from filetimefixer.connector import Connector, EntryHandle
from filetimefixer.utils.entry import FSEntry, FileTimes, SELF_NAME, PARENT_NAME


class WindowsHandle(EntryHandle):
    """Win32 file handle, timestamps in FILETIME ticks."""

    def __init__(self, path: str, handle: int):
        self.path = path
        self.handle = handle

    def get_times(self) -> FileTimes:
        from filetimefixer.utils import win32
        creation, last_write = win32.get_file_time(self.handle, self.path)
        return FileTimes(creation, last_write)

    def set_times(self, creation: int, modification: int) -> None:
        from filetimefixer.utils import win32
        win32.set_file_time(self.handle, self.path, creation, modification)


def _float_ns(seconds: float) -> int:
    return int(seconds * 1_000_000_000)


class PosixHandle(EntryHandle):
    """File descriptor handle, timestamps in nanoseconds.

    Birth time is read from ``st_birthtime``. Setting the modification time
    earlier than the birth time moves the birth time back with it on
    filesystems that record one, which is how the creation time gets written.
    """

    def __init__(self, path: str, fd: int):
        self.path = path
        self.fd = fd

    def get_times(self) -> FileTimes:
        st = os.fstat(self.fd)
        birthtime_ns = getattr(st, 'st_birthtime_ns', None)
        if birthtime_ns is not None:
            return FileTimes(birthtime_ns, st.st_mtime_ns)
        birthtime = getattr(st, 'st_birthtime', None)
        if birthtime is None:
            raise OSError(errno.ENOTSUP, 'Creation time is not available on this platform', self.path)
        # float birth time, convert mtime the same way so equal times compare equal
        return FileTimes(_float_ns(birthtime), _float_ns(st.st_mtime))

    def set_times(self, creation: int, modification: int) -> None:
        st = os.fstat(self.fd)
        if modification == _float_ns(st.st_mtime):
            modification = st.st_mtime_ns
        if os.utime in os.supports_fd:
            os.utime(self.fd, ns=(st.st_atime_ns, modification))
        else:
            os.utime(self.path, ns=(st.st_atime_ns, modification))
        # st_birthtime is a float on some platforms, compare at microsecond resolution
        if self.get_times().creation // 1000 > creation // 1000:
            raise OSError(errno.ENOTSUP, 'Creation time cannot be set on this filesystem', self.path)


class LocalConnector(Connector):
    """Local file system connector."""

    @contextmanager
    def open(self, path: str, is_file: bool, mode: str = 'r') -> Iterator[EntryHandle]:
        if mode not in ('r', 'w'):
            raise ValueError(f"invalid mode: '{mode}'")
        if os.name == 'nt':
            with self._open_windows(path, is_file, mode) as handle:
                yield handle
        else:
            with self._open_posix(path, is_file, mode) as handle:
                yield handle

    @contextmanager
    def scandir(self, path: str) -> Iterator[Iterator[FSEntry]]:
        with os.scandir(path) as it:
            yield self._iter_entries(path, it)

    @staticmethod
    def _iter_entries(path: str, it: Iterator[os.DirEntry]) -> Iterator[FSEntry]:
        yield FSEntry(SELF_NAME, path, 'dir')
        yield FSEntry(PARENT_NAME, os.path.dirname(os.path.abspath(path)), 'dir')
        for entry in it:
            if entry.is_dir():
                yield FSEntry(entry.name, entry.path, 'dir')
            else:
                yield FSEntry(entry.name, entry.path, 'file')

    @staticmethod
    @contextmanager
    def _open_windows(path: str, is_file: bool, mode: str) -> Iterator[EntryHandle]:
        from filetimefixer.utils import win32
        access = win32.GENERIC_READ if mode == 'r' else win32.GENERIC_WRITE
        handle = win32.create_file(path, access, is_file)
        try:
            yield WindowsHandle(path, handle)
        finally:
            win32.close_handle(handle)

    @staticmethod
    @contextmanager
    def _open_posix(path: str, is_file: bool, mode: str) -> Iterator[EntryHandle]:
        if mode == 'w' and is_file:
            flags = os.O_WRONLY
        else:
            flags = os.O_RDONLY
        # special files such as FIFOs must not block the walk on open
        flags |= getattr(os, 'O_NONBLOCK', 0)
        if not is_file:
            flags |= getattr(os, 'O_DIRECTORY', 0)
        fd = os.open(path, flags)
        try:
            if mode == 'w' and not is_file and not os.access(path, os.W_OK):
                raise PermissionError(errno.EACCES, os.strerror(errno.EACCES), path)
            yield PosixHandle(path, fd)
        finally:
            os.close(fd)
