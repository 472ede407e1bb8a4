import errno

from filetimefixer import EntryProcessor, ErrorKind

DAY = 24 * 60 * 60 * 10_000_000
JAN_1 = 133_485_408_000_000_000
JAN_2 = JAN_1 + DAY


class RecordingProcessor(EntryProcessor):

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls = []

    def process_entry(self, path, is_file):
        self.calls.append((path, is_file))
        super().process_entry(path, is_file)


def recording(run):
    processor = RecordingProcessor(run.connector, run.stats, run.processor.reporter)
    run.processor = run.walker.processor = processor
    return processor


def test_walk_is_pre_order_depth_first(connector, make_run):
    connector.mkdir('/root')
    connector.touch('/root/A')
    connector.mkdir('/root/B')
    connector.touch('/root/B/C')
    connector.touch('/root/D')
    run = make_run(connector)
    processor = recording(run)

    run.walker.walk('/root')

    assert processor.calls == [
        ('/root', False),
        ('/root/A', True),
        ('/root/B', False),
        ('/root/B/C', True),
        ('/root/D', True),
    ]
    assert run.stats.files_examined == sum(1 for _, is_file in processor.calls if is_file)
    assert run.stats.dirs_examined == sum(1 for _, is_file in processor.calls if not is_file)


def test_each_directory_is_examined_once(connector, make_run):
    connector.mkdir('/root', creation=JAN_2, modification=JAN_1)
    connector.mkdir('/root/a', creation=JAN_2, modification=JAN_1)
    connector.mkdir('/root/a/b', creation=JAN_2, modification=JAN_1)
    connector.mkdir('/root/c')
    run = make_run(connector)

    run.walker.walk('/root')

    assert run.stats.dirs_examined == 4
    assert run.stats.dirs_repaired == 3
    assert sorted(path for path, _, _ in connector.writes) == ['/root', '/root/a', '/root/a/b']


def test_live_run_repairs_qualifying_file(connector, make_run):
    connector.mkdir('/D', creation=JAN_1, modification=JAN_1)
    connector.touch('/D/f', creation=JAN_2, modification=JAN_1)
    run = make_run(connector)

    run.walker.walk('/D')

    assert connector.get_times('/D/f').creation == JAN_1
    assert run.stats.files_examined == 1
    assert run.stats.files_repaired == 1
    assert run.stats.dirs_examined == 1
    assert run.stats.dirs_repaired == 0
    assert run.lines == ['/D/f ... done.']


def test_simulated_run_leaves_qualifying_file(connector, make_run):
    connector.mkdir('/D', creation=JAN_1, modification=JAN_1)
    connector.touch('/D/f', creation=JAN_2, modification=JAN_1)
    run = make_run(connector, simulate=True)

    run.walker.walk('/D')

    assert connector.get_times('/D/f').creation == JAN_2
    assert connector.writes == []
    assert run.stats.files_repaired == 1
    assert run.lines == ['Would be repaired: /D/f']


def test_simulation_matches_live_counts(connector, make_run):
    connector.mkdir('/r', creation=JAN_2, modification=JAN_1)
    connector.touch('/r/a', creation=JAN_2, modification=JAN_1)
    connector.touch('/r/b', creation=JAN_1, modification=JAN_2)
    connector.mkdir('/r/s')
    connector.touch('/r/s/c', creation=JAN_2, modification=JAN_1)
    simulated = make_run(connector, simulate=True)
    simulated.walker.walk('/r')

    live = make_run(connector)
    live.walker.walk('/r')

    for name in ('files_examined', 'dirs_examined', 'files_repaired', 'dirs_repaired'):
        assert getattr(simulated.stats, name) == getattr(live.stats, name)
    assert live.stats.files_repaired <= live.stats.files_examined
    assert live.stats.dirs_repaired <= live.stats.dirs_examined


def test_unreadable_subdirectory_is_skipped(connector, make_run):
    connector.mkdir('/root')
    connector.touch('/root/a', creation=JAN_2, modification=JAN_1)
    connector.mkdir('/root/locked', creation=JAN_2, modification=JAN_1)
    connector.touch('/root/locked/inner', creation=JAN_2, modification=JAN_1)
    connector.touch('/root/z', creation=JAN_2, modification=JAN_1)
    connector.fail('/root/locked', 'scandir', errno.EACCES)
    run = make_run(connector)

    run.walker.walk('/root')

    assert [(e.kind, e.path) for e in run.stats.errors] == [
        (ErrorKind.ENUMERATION_START_FAILED, '/root/locked'),
    ]
    assert 'Error finding files in directory: /root/locked (error 13)' in run.lines
    assert run.stats.dirs_examined == 1
    assert run.stats.files_examined == 2
    assert run.stats.files_repaired == 2
    assert connector.get_times('/root/locked').creation == JAN_2
    assert connector.get_times('/root/locked/inner').creation == JAN_2


def test_missing_root_reports_and_returns(connector, make_run):
    run = make_run(connector)

    run.walker.walk('/nowhere')

    assert [e.kind for e in run.stats.errors] == [ErrorKind.ENUMERATION_START_FAILED]
    assert run.stats.errors[0].code == errno.ENOENT
    assert run.stats.dirs_examined == 0
    assert run.stats.files_examined == 0


def test_listing_failure_keeps_visited_children(connector, make_run):
    connector.mkdir('/root')
    connector.touch('/root/first', creation=JAN_2, modification=JAN_1)
    connector.touch('/root/second', creation=JAN_2, modification=JAN_1)
    connector.mkdir('/root/sibling')
    connector.fail('/root', 'scandir_step', errno.EIO)
    run = make_run(connector)

    run.walker.walk('/root')

    assert run.stats.files_examined == 1
    assert connector.get_times('/root/first').creation == JAN_1
    assert connector.get_times('/root/second').creation == JAN_2
    assert run.lines[-1] == f'Directory listing error ({errno.EIO}) for directory: /root'
    assert [e.kind for e in run.stats.errors] == [ErrorKind.ENUMERATION_STEP_FAILED]
    assert connector.open_handles == set()


def test_entry_errors_do_not_stop_the_walk(connector, make_run):
    connector.mkdir('/root')
    connector.touch('/root/a', creation=JAN_2, modification=JAN_1)
    connector.touch('/root/b', creation=JAN_2, modification=JAN_1)
    connector.touch('/root/c', creation=JAN_2, modification=JAN_1)
    connector.fail('/root/b', 'set_times')
    run = make_run(connector)

    run.walker.walk('/root')

    assert run.stats.files_examined == 3
    assert run.stats.files_repaired == 2
    assert run.lines == ['/root/a ... done.', '/root/b ... error! (error 13)', '/root/c ... done.']


def test_separate_runs_do_not_share_counters(connector, make_run):
    connector.mkdir('/root')
    connector.touch('/root/a')
    first = make_run(connector)
    first.walker.walk('/root')
    second = make_run(connector)
    second.walker.walk('/root')

    assert first.stats.files_examined == 1
    assert second.stats.files_examined == 1


def test_listing_failure_fires_for_single_child(connector, make_run):
    connector.mkdir('/root')
    connector.touch('/root/only', creation=JAN_2, modification=JAN_1)
    connector.fail('/root', 'scandir_step', errno.EIO)
    run = make_run(connector)

    run.walker.walk('/root')

    assert run.stats.files_examined == 1
    assert [e.kind for e in run.stats.errors] == [ErrorKind.ENUMERATION_STEP_FAILED]
