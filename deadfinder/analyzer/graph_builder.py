"""Import graph built from import-path spellings, using NetworkX.

There is no module resolution here: a file counts as imported when some
other file contains an import-shaped string whose path is one of the
plausible spellings of it. This is a known accuracy ceiling. A real module
graph would need the bundler's resolution rules (aliases, index files,
package exports) and is out of scope.
"""
import logging
import re
from pathlib import PurePosixPath
from typing import List, Optional

import networkx as nx

from .parser import SourceFile

logger = logging.getLogger(__name__)

# from '<x>' / import '<x>' / import('<x>') / require('<x>')
_IMPORT_PREFIX = r'''(?:\bfrom\s*|\bimport\s*\(?\s*|\brequire\s*\(\s*)['"`]'''
_QUOTE = r'''['"`]'''


class DependencyGraphBuilder:
    """Build a directed graph where edge (A, B) means "file A imports file B"."""

    def __init__(self, src_dir: Optional[str] = None):
        """Initialize graph builder.

        Args:
            src_dir: Declared source root, for root-relative spellings
        """
        self.src_dir = src_dir

    def build_graph(self, sources: List[SourceFile]) -> nx.DiGraph:
        """Build the import graph for a file set.

        Every file becomes a node carrying its SourceFile. For each target the
        scan stops at the first importer found, so in-degree is 0 or 1.

        Args:
            sources: Files read for this run, in discovery order

        Returns:
            NetworkX DiGraph with file dependencies
        """
        graph = nx.DiGraph()
        for source in sources:
            graph.add_node(source.path, source=source)

        for target in sources:
            pattern = self.import_pattern(target)
            for importer in sources:
                if importer.path == target.path:
                    continue
                match = pattern.search(importer.text)
                if match:
                    graph.add_edge(importer.path, target.path, spelling=match.group('spelling'))
                    break

        logger.debug("Import graph: %d files, %d edges", graph.number_of_nodes(), graph.number_of_edges())
        return graph

    def candidate_spellings(self, source: SourceFile) -> dict:
        """Plausible import paths for a file.

        Returns:
            Dict with ``exact`` spellings (must appear verbatim) and ``bare``
            spellings (may follow any directory prefix such as ``../lib/``)
        """
        path = PurePosixPath(source.display_path)
        basename = path.name
        stem = basename[:-len(path.suffix)] if path.suffix else basename

        exact = [f'./{stem}', f'./{basename}']
        if len(path.parts) > 1 or self.src_dir is not None:
            relative = path.as_posix()
            relative_stem = relative[:-len(path.suffix)] if path.suffix else relative
            for spelling in (relative_stem, relative):
                exact.extend([spelling, f'./{spelling}', f'@/{spelling}'])

        bare = [stem, basename]
        return {
            'exact': list(dict.fromkeys(exact)),
            'bare': list(dict.fromkeys(bare)),
        }

    def import_pattern(self, source: SourceFile) -> re.Pattern:
        """Compile one regex matching any import-shaped reference to a file."""
        spellings = self.candidate_spellings(source)
        exact = '|'.join(re.escape(s) for s in spellings['exact'])
        bare = '|'.join(re.escape(s) for s in spellings['bare'])
        return re.compile(
            _IMPORT_PREFIX
            + r'(?P<spelling>(?:' + exact + r')|(?:[^\'"`\s]*/)?(?:' + bare + r'))'
            + _QUOTE
        )
