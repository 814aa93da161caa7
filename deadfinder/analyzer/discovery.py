"""Source file discovery under a project's source root."""
import fnmatch
import logging
from pathlib import Path
from typing import Iterable, List

from ..errors import DiscoveryFailure
from .parser import DIALECTS

logger = logging.getLogger(__name__)

# Build artifacts and tooling directories, skipped whatever the ignore list says
EXCLUDED_DIRS = {'node_modules', '.git', '.next', 'dist', 'build', 'coverage'}


def is_ignored(relative_path: str, ignore_patterns: Iterable[str]) -> bool:
    """Match a POSIX path relative to the source root against ignore globs.

    ``**/`` at the start of a pattern also matches at depth zero, so
    ``**/*.test.*`` ignores ``a.test.ts`` as well as ``x/a.test.ts``.
    """
    for pattern in ignore_patterns:
        if fnmatch.fnmatch(relative_path, pattern):
            return True
        if pattern.startswith('**/') and fnmatch.fnmatch(relative_path, pattern[3:]):
            return True
    return False


def discover_files(src_dir: str | Path, ignore_patterns: Iterable[str] = ()) -> List[Path]:
    """Discover all supported source files under a root.

    Args:
        src_dir: Source root directory
        ignore_patterns: Glob patterns relative to ``src_dir``

    Returns:
        Sorted list of file paths

    Raises:
        DiscoveryFailure: If the root is missing, not a directory or unreadable
    """
    root = Path(src_dir)
    if not root.exists():
        raise DiscoveryFailure(root, "directory does not exist")
    if not root.is_dir():
        raise DiscoveryFailure(root, "not a directory")

    ignore_patterns = list(ignore_patterns)
    files = []
    try:
        for path in root.rglob('*'):
            if path.suffix.lower() not in DIALECTS:
                continue
            relative = path.relative_to(root)
            if any(part in EXCLUDED_DIRS for part in relative.parts[:-1]):
                continue
            if is_ignored(relative.as_posix(), ignore_patterns):
                continue
            if path.is_file():
                files.append(path)
    except OSError as e:
        raise DiscoveryFailure(root, e.strerror or str(e)) from e

    logger.debug("Discovered %d source files under %s", len(files), root)
    return sorted(files)
