"""Error taxonomy for the dead code finder.

Only DiscoveryFailure aborts a run. Everything else is recovered locally
and surfaced as a warning so the operator knows results may be partial.
"""
from pathlib import Path


class DeadFinderError(Exception):
    """Base class for all dead code finder errors."""


class ParseFailure(DeadFinderError):
    """A file could not be parsed into a syntax tree."""

    def __init__(self, file_path: str | Path, reason: str = "syntax error"):
        self.file_path = str(file_path)
        self.reason = reason
        super().__init__(f"Failed to parse {self.file_path}: {reason}")


class FileReadFailure(DeadFinderError):
    """A source file could not be read or decoded."""

    def __init__(self, file_path: str | Path, reason: str):
        self.file_path = str(file_path)
        self.reason = reason
        super().__init__(f"Could not read {self.file_path}: {reason}")


class ConfigParseFailure(DeadFinderError):
    """A configuration file exists but is not valid."""

    def __init__(self, config_path: str | Path, reason: str):
        self.config_path = str(config_path)
        self.reason = reason
        super().__init__(f"Failed to parse config file {self.config_path}: {reason}")


class DiscoveryFailure(DeadFinderError):
    """The source root cannot be enumerated at all."""

    def __init__(self, src_dir: str | Path, reason: str):
        self.src_dir = str(src_dir)
        self.reason = reason
        super().__init__(f"Cannot scan source directory {self.src_dir}: {reason}")
