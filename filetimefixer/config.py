import logging
import sys
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, List, Optional

import yaml


@dataclass(frozen=True)
class FixerConfig:
    """Run options.

    Attributes
    ----------
    simulate : bool, default=False
        Report repairs without writing any timestamp.
    progress : Optional[bool], default=None
        Show a progress counter. None shows it when stderr is a terminal.
    log_level : str, default='WARNING'
        Logging level name.
    log_file : Optional[str], default=None
        Additional log file path.
    """

    simulate: bool = False
    progress: Optional[bool] = None
    log_level: str = 'WARNING'
    log_file: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.simulate, bool):
            raise ValueError(f"'simulate' must be a boolean, got {self.simulate!r}")
        if self.progress is not None and not isinstance(self.progress, bool):
            raise ValueError(f"'progress' must be a boolean, got {self.progress!r}")
        if not isinstance(logging.getLevelName(str(self.log_level).upper()), int):
            raise ValueError(f"invalid log level: '{self.log_level}'")

    @classmethod
    def from_yaml(cls, path: str) -> 'FixerConfig':
        """Creates class instance from configuration path.

        Parameters
        ----------
        path : str
            path to configuration file.

        Returns
        -------
        FixerConfig
            Class instance.
        """
        with open(path) as f:
            config = yaml.safe_load(f) or {}
        if not isinstance(config, dict):
            raise ValueError(f"Configuration file '{path}' must contain a mapping")
        known = cls.field_names()
        for key in config.keys():
            if key not in known:
                raise ValueError(f"Unknown configuration field '{key}' in '{path}'")
        return cls(**config)

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    def override(self, **values: Any) -> 'FixerConfig':
        """Copy with the values that are not None replaced."""
        changes: Dict[str, Any] = {key: value for key, value in values.items() if value is not None}
        return replace(self, **changes)

    @property
    def show_progress(self) -> bool:
        if self.progress is None:
            return sys.stderr.isatty()
        return self.progress
