import errno
import posixpath
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Literal, Optional, Set, Tuple
from contextlib import contextmanager

from filetimefixer.connector import Connector, EntryHandle
from filetimefixer.utils.entry import FSEntry, FileTimes, SELF_NAME, PARENT_NAME

FAILURE_POINTS = ('open_read', 'get_times', 'open_write', 'set_times', 'scandir', 'scandir_step')


@dataclass
class MemoryNode:
    type: Literal['file', 'dir']
    creation: int = 0
    modification: int = 0
    children: List[str] = field(default_factory=list)
    failures: Dict[str, int] = field(default_factory=dict)


class MemoryHandle(EntryHandle):
    """Handle to an in-memory entry."""

    def __init__(self, connector: 'MemoryConnector', path: str, mode: str):
        self.connector = connector
        self.path = path
        self.mode = mode

    def get_times(self) -> FileTimes:
        node = self.connector._check(self.path, 'get_times')
        return FileTimes(node.creation, node.modification)

    def set_times(self, creation: int, modification: int) -> None:
        if self.mode != 'w':
            raise PermissionError(errno.EBADF, 'Handle is not open for writing', self.path)
        node = self.connector._check(self.path, 'set_times')
        node.creation = creation
        node.modification = modification
        self.connector.writes.append((self.path, creation, modification))


class MemoryConnector(Connector):
    """In-memory file system connector.

    Paths are POSIX-style and absolute. Any entry can be made to fail at one of
    ``FAILURE_POINTS`` with a given error code, which is raised as ``OSError``.

    Attributes
    ----------
    writes : list[tuple[str, int, int]]
        Every successful ``set_times`` call as (path, creation, modification).
    open_handles : set[str]
        Paths with a currently open handle or listing.
    """

    def __init__(self) -> None:
        self.nodes: Dict[str, MemoryNode] = {'/': MemoryNode('dir')}
        self.writes: List[Tuple[str, int, int]] = []
        self.open_handles: Set[str] = set()

    def mkdir(self, path: str, creation: int = 0, modification: int = 0) -> None:
        """Make directory, parents must exist.

        Parameters
        ----------
        path : str
            Directory path.
        creation : int, default=0
            Creation time.
        modification : int, default=0
            Modification time.
        """
        self._add(path, MemoryNode('dir', creation, modification))

    def touch(self, path: str, creation: int = 0, modification: int = 0) -> None:
        """Make file, parents must exist.

        Parameters
        ----------
        path : str
            File path.
        creation : int, default=0
            Creation time.
        modification : int, default=0
            Modification time.
        """
        self._add(path, MemoryNode('file', creation, modification))

    def fail(self, path: str, point: str, code: int = errno.EACCES) -> None:
        """Make an operation on an entry fail.

        Parameters
        ----------
        path : str
            Entry path.
        point : str
            One of ``FAILURE_POINTS``. 'scandir_step' fails after the pseudo-entries
            and the first real child have been listed, or after the last child
            of a directory with fewer than two children.
        code : int, default=errno.EACCES
            Error code carried by the raised ``OSError``.
        """
        if point not in FAILURE_POINTS:
            raise ValueError(f"invalid failure point: '{point}'")
        self._get(self._normalize(path)).failures[point] = code

    def get_times(self, path: str) -> FileTimes:
        node = self._get(self._normalize(path))
        return FileTimes(node.creation, node.modification)

    @contextmanager
    def open(self, path: str, is_file: bool, mode: str = 'r') -> Iterator[EntryHandle]:
        if mode not in ('r', 'w'):
            raise ValueError(f"invalid mode: '{mode}'")
        path = self._normalize(path)
        node = self._check(path, 'open_read' if mode == 'r' else 'open_write')
        if is_file and node.type == 'dir':
            raise IsADirectoryError(errno.EISDIR, 'Is a directory', path)
        self.open_handles.add(path)
        try:
            yield MemoryHandle(self, path, mode)
        finally:
            self.open_handles.discard(path)

    @contextmanager
    def scandir(self, path: str) -> Iterator[Iterator[FSEntry]]:
        path = self._normalize(path)
        node = self._check(path, 'scandir')
        if node.type != 'dir':
            raise NotADirectoryError(errno.ENOTDIR, 'Not a directory', path)
        listing = f'{path}/*'
        self.open_handles.add(listing)
        try:
            yield self._iter_entries(path, node)
        finally:
            self.open_handles.discard(listing)

    def _iter_entries(self, path: str, node: MemoryNode) -> Iterator[FSEntry]:
        yield FSEntry(SELF_NAME, path, 'dir')
        yield FSEntry(PARENT_NAME, posixpath.dirname(path), 'dir')
        step_failure = node.failures.get('scandir_step')
        for index, name in enumerate(list(node.children)):
            if step_failure is not None and index == 1:
                raise OSError(step_failure, 'Listing failed', path)
            child_path = posixpath.join(path, name)
            yield FSEntry(name, child_path, self.nodes[child_path].type)
        if step_failure is not None:
            raise OSError(step_failure, 'Listing failed', path)

    def _add(self, path: str, node: MemoryNode) -> None:
        path = self._normalize(path)
        if path in self.nodes:
            raise FileExistsError(errno.EEXIST, 'File exists', path)
        parent = self._get(posixpath.dirname(path))
        if parent.type != 'dir':
            raise NotADirectoryError(errno.ENOTDIR, 'Not a directory', posixpath.dirname(path))
        parent.children.append(posixpath.basename(path))
        self.nodes[path] = node

    def _get(self, path: str) -> MemoryNode:
        node = self.nodes.get(path)
        if node is None:
            raise FileNotFoundError(errno.ENOENT, 'No such file or directory', path)
        return node

    def _check(self, path: str, point: str) -> MemoryNode:
        node = self._get(path)
        code: Optional[int] = node.failures.get(point)
        if code is not None:
            raise OSError(code, f'{point} failed', path)
        return node

    @staticmethod
    def _normalize(path: str) -> str:
        return posixpath.normpath(posixpath.join('/', path))
