"""Orphan file detection - files nothing appears to import."""
import logging
import os
import re
from dataclasses import dataclass
from pathlib import PurePath
from typing import List, Optional

import networkx as nx

from .heuristics import is_entry_point

logger = logging.getLogger(__name__)

# Any export-introducing keyword, ESM or CommonJS
EXPORT_KEYWORD_RE = re.compile(
    r'\bexport\s+(?:\{|\*|(?:default|const|let|var|function|class|interface|type|enum|async|abstract|declare)\b)'
    r'|\bmodule\.exports\b|\bexports\.'
)

CONFIG_LIKE_RE = re.compile(r'config|Config|setup|Setup')


@dataclass(frozen=True)
class UnusedFile:
    """A file with no detected importer."""
    path: str
    display_path: str
    size: int  # bytes

    @property
    def size_kb(self) -> float:
        return self.size / 1024


class OrphanDetector:
    """Detect orphan files (zero incoming edges, excluding conventional exemptions).

    Deliberately conservative: a file is reported only when every exemption
    fails, trading missed dead files for fewer false alarms.
    """

    ROOT_STEMS = {'index', 'main'}

    # Directories whose files are typically consumed in ways the spelling scan misses
    LIBRARY_DIRECTORIES = {'utils', 'lib', 'helpers', 'services', 'hooks', 'components'}

    def __init__(self, src_dir: Optional[str] = None):
        """Initialize orphan detector.

        Args:
            src_dir: Source root; entry-point checks use paths relative to it
        """
        self.src_dir = src_dir
        self.warnings: List[str] = []

    def detect_orphans(self, graph: nx.DiGraph) -> List[UnusedFile]:
        """Find unused files in an import graph.

        Args:
            graph: Graph from DependencyGraphBuilder; nodes carry a ``source``

        Returns:
            Unused files in discovery order (stat failures are left out and
            recorded in ``self.warnings``)
        """
        self.warnings = []
        orphans = []

        for node in graph.nodes:
            if graph.in_degree(node) > 0:
                continue
            source = graph.nodes[node]['source']
            if self._exempt(PurePath(source.classification_path), source.text):
                continue

            try:
                size = os.stat(source.path).st_size
            except OSError as e:
                message = f"Could not stat {source.path}: {e.strerror or e}"
                logger.warning(message)
                self.warnings.append(message)
                continue

            orphans.append(UnusedFile(path=source.path, display_path=source.display_path, size=size))

        return orphans

    def is_exempt(self, file_path: str, text: str) -> bool:
        """Check every convention that keeps an unimported file off the report."""
        path = PurePath(file_path)
        if self.src_dir is not None:
            try:
                path = path.relative_to(PurePath(self.src_dir))
            except ValueError:
                pass
        return self._exempt(path, text)

    def _exempt(self, path: PurePath, text: str) -> bool:
        if is_entry_point(path):
            return True

        if EXPORT_KEYWORD_RE.search(text):
            return True

        stem = path.stem
        if stem in self.ROOT_STEMS:
            return True

        if CONFIG_LIKE_RE.search(path.name):
            return True

        if any(part in self.LIBRARY_DIRECTORIES for part in path.parts[:-1]):
            return True

        return False
