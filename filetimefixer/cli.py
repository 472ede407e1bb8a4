import argparse
import logging
import os
import sys
import time
from typing import IO, List, Optional

import yaml

from filetimefixer.config import FixerConfig
from filetimefixer.connector import Connector
from filetimefixer.fixer import EntryProcessor, TreeWalker
from filetimefixer.local import LocalConnector
from filetimefixer.report import Reporter
from filetimefixer.stats import RunStatistics

logger = logging.getLogger(__name__)


def setup_logging(level: str = 'WARNING', log_file: Optional[str] = None) -> None:
    """Configure logging to stderr and optionally to a file."""
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))
    logging.basicConfig(
        level=level.upper(),
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True
    )


class CLI:
    """Creation time repair run.

    Attributes
    ----------
    connector : Connector
        File system connector.
    config : FixerConfig
        Run options.
    stream : Optional[IO[str]]
        Report output stream, stdout if None.
    """

    def __init__(
        self,
        connector: Connector,
        config: FixerConfig,
        stream: Optional[IO[str]] = None
    ):
        self.connector = connector
        self.config = config
        self.stream = stream

    def run(self, directory_path: str) -> RunStatistics:
        """Walk a directory tree and print final statistics.

        Parameters
        ----------
        directory_path : str
            Root directory path.

        Returns
        -------
        RunStatistics
            Counters of the run.
        """
        stats = RunStatistics()
        reporter = Reporter(self.stream, progress=self.config.show_progress)
        processor = EntryProcessor(self.connector, stats, reporter, simulate=self.config.simulate)
        walker = TreeWalker(self.connector, processor)

        if self.config.simulate:
            reporter.line('Simulating creation time fixes:')
        else:
            reporter.line('Fixing files creation time:')
        start = time.perf_counter()
        try:
            walker.walk(directory_path)
        finally:
            reporter.close()
        elapsed = time.perf_counter() - start

        reporter.summary(stats, self.config.simulate, elapsed)
        logger.info(
            'Examined %d files and %d directories, repaired %d files and %d directories, %d errors',
            stats.files_examined, stats.dirs_examined, stats.files_repaired, stats.dirs_repaired, len(stats.errors)
        )
        return stats


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='filetimefixer',
        description='Set creation time to modification time for every file and directory '
                    'whose creation time is later than its modification time.'
    )
    parser.add_argument('directory', type=str, help='root directory path')
    parser.add_argument('-s', '--simulate', action='store_true', default=None,
                        help='report what would be repaired without writing')
    parser.add_argument('-c', '--config', dest='config_path', type=str, help='path to configuration file')
    parser.add_argument('--log-level', type=str, help='logging level (default: WARNING)')
    parser.add_argument('--log-file', type=str, help='path to log file')
    parser.add_argument('--no-progress', action='store_false', dest='progress', default=None,
                        help='hide progress counter')
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        config = FixerConfig.from_yaml(args.config_path) if args.config_path else FixerConfig()
        config = config.override(
            simulate=args.simulate,
            progress=args.progress,
            log_level=args.log_level,
            log_file=args.log_file
        )
    except (OSError, ValueError, yaml.YAMLError) as err:
        print(f'Invalid configuration: {err}', file=sys.stderr)
        return 1
    setup_logging(config.log_level, config.log_file)

    if not os.path.isdir(args.directory):
        logger.error('Not a directory: %s', args.directory)
        print(f'Not a directory: {args.directory}', file=sys.stderr)
        return 1

    CLI(LocalConnector(), config).run(args.directory)
    return 0

