"""Usage index and used/unused verdicts for definitions."""
import logging
import re
from typing import Dict, Iterable, List, Optional, Tuple

from .extractor import DEFINITION_KINDS, Definition, FileAnalysis, UsageOccurrence
from .heuristics import is_hook_name
from . import patterns

logger = logging.getLogger(__name__)


class UsageIndex:
    """Map each name to its usage occurrences, in discovery order."""

    def __init__(self):
        self._occurrences: Dict[str, List[UsageOccurrence]] = {}
        # name -> set of files that reference it, for the cross-file check
        self._files: Dict[str, set] = {}

    def add(self, occurrence: UsageOccurrence):
        self._occurrences.setdefault(occurrence.name, []).append(occurrence)
        self._files.setdefault(occurrence.name, set()).add(occurrence.file_path)

    def extend(self, occurrences: Iterable[UsageOccurrence]):
        for occurrence in occurrences:
            self.add(occurrence)

    def get(self, name: str) -> List[UsageOccurrence]:
        return list(self._occurrences.get(name, ()))

    def count(self, name: str) -> int:
        return len(self._occurrences.get(name, ()))

    def used_outside(self, name: str, file_path: str) -> bool:
        """True if any file other than ``file_path`` references ``name``."""
        files = self._files.get(name)
        if not files:
            return False
        return len(files) > 1 or file_path not in files

    def __contains__(self, name: str) -> bool:
        return name in self._occurrences

    def __len__(self) -> int:
        return len(self._occurrences)


class ReferenceTracker:
    """Decide whether each definition is used.

    Rules are applied in order and the first match wins:

    1. a usage recorded in any other file
    2. a call, markup tag or bare-word reference in the defining file itself
    3. a literal ``export default NAME`` in the defining file
    4. exported but never referenced anywhere: unused
    5. hook naming convention (``useSomething``): used
    6. otherwise unused
    """

    def __init__(self, index: UsageIndex, sources: Dict[str, str], analyses: List[FileAnalysis]):
        """Initialize reference tracker.

        Args:
            index: Usage index built by the strategy that ran
            sources: Raw text per file path
            analyses: Per-file analyses, in discovery order
        """
        self.index = index
        self.sources = sources
        self.analyses = analyses
        self.exports: Dict[str, set] = {a.file_path: a.exports for a in analyses}
        self._local_text_cache: Dict[str, str] = {}
        self._stripped_cache: Dict[str, str] = {}

    def is_used(self, definition: Definition) -> bool:
        """Return the verdict for a definition."""
        return self.explain(definition)[0]

    def explain(self, definition: Definition) -> Tuple[bool, str]:
        """Return the verdict for a definition together with the deciding rule."""
        name = definition.name
        file_path = definition.file_path

        if self.index.used_outside(name, file_path):
            return True, 'referenced in another file'

        if self._used_locally(name, file_path):
            return True, 'referenced in its own file'

        if self._default_exported(name, file_path):
            return True, 'default export'

        if name in self.exports.get(file_path, ()) and self.index.count(name) == 0:
            return False, 'exported but never referenced'

        if is_hook_name(name):
            return True, 'hook naming convention'

        return False, 'no references'

    def find_unused(self) -> Dict[str, List[Definition]]:
        """Collect unused definitions grouped by kind, in discovery order."""
        unused: Dict[str, List[Definition]] = {kind: [] for kind in DEFINITION_KINDS}
        for analysis in self.analyses:
            for definition in analysis.definitions:
                used, reason = self.explain(definition)
                if not used:
                    logger.debug("%s in %s:%d unused (%s)",
                                 definition.name, definition.file_path, definition.line, reason)
                    unused[definition.kind].append(definition)
        return unused

    # --- Per-file text checks ---

    def _stripped_text(self, file_path: str) -> str:
        text = self._stripped_cache.get(file_path)
        if text is None:
            text = patterns.strip_comments(self.sources.get(file_path, ''))
            self._stripped_cache[file_path] = text
        return text

    def _local_text(self, file_path: str) -> str:
        """Comment-free text with imports and export clauses blanked."""
        text = self._local_text_cache.get(file_path)
        if text is None:
            text = patterns.mask_export_clauses(patterns.mask_imports(self._stripped_text(file_path)))
            self._local_text_cache[file_path] = text
        return text

    def _used_locally(self, name: str, file_path: str) -> bool:
        text = patterns.mask_declaration_sites(self._local_text(file_path), name)
        escaped = re.escape(name)
        local_patterns = (
            r'(?<![\w$])' + escaped + r'\s*\(',
            r'<' + escaped + r'[\s/>]',
            r'(?<![\w$])' + escaped + r'(?![\w$])',
        )
        return any(re.search(p, text) for p in local_patterns)

    def _default_exported(self, name: str, file_path: str) -> bool:
        pattern = r'\bexport\s+default\s+' + re.escape(name) + r'(?![\w$])'
        return re.search(pattern, self._stripped_text(file_path)) is not None


def build_index(analyses: Iterable[FileAnalysis], index: Optional[UsageIndex] = None) -> UsageIndex:
    """Aggregate every analysis' usages into one index."""
    index = index if index is not None else UsageIndex()
    for analysis in analyses:
        index.extend(analysis.usages)
    return index
