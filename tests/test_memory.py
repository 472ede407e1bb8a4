import errno

import pytest

from filetimefixer import MemoryConnector


def test_scandir_lists_children_in_insertion_order(connector):
    connector.mkdir('/r')
    connector.touch('/r/b')
    connector.mkdir('/r/a')

    with connector.scandir('/r') as entries:
        listed = [(e.name, e.path, e.type) for e in entries]

    assert listed == [('.', '/r', 'dir'), ('..', '/', 'dir'), ('b', '/r/b', 'file'), ('a', '/r/a', 'dir')]
    assert connector.open_handles == set()


def test_scandir_on_file_raises(connector):
    connector.touch('/f')
    with pytest.raises(NotADirectoryError):
        with connector.scandir('/f'):
            pass


def test_open_directory_as_file_raises(connector):
    connector.mkdir('/d')
    with pytest.raises(IsADirectoryError):
        with connector.open('/d', is_file=True):
            pass


def test_read_handle_cannot_write(connector):
    connector.touch('/f', creation=2, modification=1)
    with connector.open('/f', is_file=True, mode='r') as handle:
        with pytest.raises(PermissionError):
            handle.set_times(1, 1)
    assert connector.writes == []


def test_injected_failure_carries_code(connector):
    connector.touch('/f')
    connector.fail('/f', 'get_times', errno.EIO)

    with connector.open('/f', is_file=True) as handle:
        with pytest.raises(OSError) as exc_info:
            handle.get_times()

    assert exc_info.value.errno == errno.EIO


def test_unknown_failure_point_raises(connector):
    connector.touch('/f')
    with pytest.raises(ValueError):
        connector.fail('/f', 'everything')


def test_duplicate_and_orphan_entries_raise():
    connector = MemoryConnector()
    connector.mkdir('/d')
    with pytest.raises(FileExistsError):
        connector.mkdir('/d')
    with pytest.raises(FileNotFoundError):
        connector.touch('/missing/f')


def test_step_failure_on_empty_directory_raises_after_pseudo_entries(connector):
    connector.mkdir('/empty')
    connector.fail('/empty', 'scandir_step', errno.EIO)

    listed = []
    with connector.scandir('/empty') as entries:
        with pytest.raises(OSError) as exc_info:
            for entry in entries:
                listed.append(entry.name)

    assert listed == ['.', '..']
    assert exc_info.value.errno == errno.EIO
