"""Run one analysis strategy over a file set and aggregate the verdicts."""
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from ..errors import FileReadFailure, ParseFailure
from .extractor import Definition, FileAnalysis, StructuralExtractor
from .graph_builder import DependencyGraphBuilder
from .orphan_detector import OrphanDetector, UnusedFile
from .parser import SourceFile, read_source_file
from .pattern_extractor import LexicalExtractor
from .reference_tracker import ReferenceTracker, build_index

logger = logging.getLogger(__name__)

# Accepted strategy names -> canonical name
STRATEGIES = {
    'structural': 'structural',
    'ast': 'structural',
    'lexical': 'lexical',
    'regex': 'lexical',
}


def normalize_strategy(strategy: str) -> str:
    """Resolve a strategy name or alias.

    Raises:
        ValueError: If the name is not a known strategy
    """
    canonical = STRATEGIES.get((strategy or '').strip().lower())
    if canonical is None:
        choices = ', '.join(sorted(STRATEGIES))
        raise ValueError(f"Unknown analysis strategy '{strategy}' (choose from: {choices})")
    return canonical


@dataclass
class AnalysisResult:
    """Unused definitions and files found in one run."""
    unused_components: List[Definition] = field(default_factory=list)
    unused_functions: List[Definition] = field(default_factory=list)
    unused_variables: List[Definition] = field(default_factory=list)
    unused_imports: List[Definition] = field(default_factory=list)
    unused_files: List[UnusedFile] = field(default_factory=list)
    strategy: str = 'structural'
    files_analyzed: int = 0
    warnings: List[str] = field(default_factory=list)

    @property
    def totals(self) -> dict:
        return {
            'components': len(self.unused_components),
            'functions': len(self.unused_functions),
            'variables': len(self.unused_variables),
            'imports': len(self.unused_imports),
            'files': len(self.unused_files),
        }

    @property
    def total_unused_bytes(self) -> int:
        return sum(f.size for f in self.unused_files)

    def to_dict(self) -> dict:
        """JSON-serializable view of the result."""
        def definitions(items):
            return [
                {'name': d.name, 'kind': d.kind, 'file': d.file_path, 'line': d.line, 'exported': d.exported}
                for d in items
            ]

        return {
            'strategy': self.strategy,
            'files_analyzed': self.files_analyzed,
            'totals': self.totals,
            'unused_components': definitions(self.unused_components),
            'unused_functions': definitions(self.unused_functions),
            'unused_variables': definitions(self.unused_variables),
            'unused_imports': definitions(self.unused_imports),
            'unused_files': [
                {'path': f.path, 'display_path': f.display_path, 'size': f.size}
                for f in self.unused_files
            ],
            'warnings': list(self.warnings),
        }


def _default_root(files: List[Path]) -> Optional[str]:
    """Common parent directory of a file set, used when no root is given."""
    if not files:
        return None
    try:
        return os.path.commonpath([str(f.parent) for f in files])
    except ValueError:
        # Mix of absolute and relative paths
        return None


def _warn(result: AnalysisResult, error: Exception):
    message = str(error)
    logger.warning(message)
    result.warnings.append(message)


def analyze(files: Iterable[str | Path], strategy: str = 'structural',
            src_dir: Optional[str | Path] = None) -> AnalysisResult:
    """Find unused definitions and unused files in a file set.

    Files are read once, in the given order. Unreadable files are skipped
    and files that fail to parse contribute nothing; both leave a warning in
    the result instead of aborting the run.

    Args:
        files: Source file paths (order is kept in the report)
        strategy: 'structural' / 'ast' or 'lexical' / 'regex'
        src_dir: Source root for display paths and root-relative import
            spellings; defaults to the files' common parent, which then only
            shortens display paths (conventions see the full path)

    Returns:
        AnalysisResult for the run

    Raises:
        ValueError: If the strategy name is unknown
    """
    canonical = normalize_strategy(strategy)
    files = [Path(f) for f in files]
    root_inferred = src_dir is None
    if root_inferred:
        src_dir = _default_root(files)
    src_dir = str(src_dir) if src_dir is not None else None

    result = AnalysisResult(strategy=canonical)

    # Read phase
    sources: List[SourceFile] = []
    for file_path in files:
        try:
            sources.append(read_source_file(file_path, src_dir, root_inferred=root_inferred))
        except FileReadFailure as e:
            _warn(result, e)
    result.files_analyzed = len(sources)

    # Definition / usage phase
    extractor = StructuralExtractor() if canonical == 'structural' else LexicalExtractor()
    analyses: List[FileAnalysis] = []
    for source in sources:
        try:
            analyses.append(extractor.analyze_file(source))
        except ParseFailure as e:
            _warn(result, e)
            analyses.append(FileAnalysis(file_path=source.path))

    index = build_index(analyses)
    tracker = ReferenceTracker(index, {s.path: s.text for s in sources}, analyses)
    unused = tracker.find_unused()
    result.unused_components = unused['component']
    result.unused_functions = unused['function']
    result.unused_variables = unused['variable']
    result.unused_imports = unused['import']

    # File phase, independent of the usage index
    graph = DependencyGraphBuilder(src_dir).build_graph(sources)
    detector = OrphanDetector(src_dir)
    result.unused_files = detector.detect_orphans(graph)
    result.warnings.extend(detector.warnings)

    logger.info("Analyzed %d files with %s strategy: %s", result.files_analyzed, canonical, result.totals)
    return result
