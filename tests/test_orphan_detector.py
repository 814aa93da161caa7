"""Tests for the import-spelling graph and unused-file detection."""
import os

import pytest

from deadfinder.analyzer.graph_builder import DependencyGraphBuilder
from deadfinder.analyzer.orphan_detector import OrphanDetector
from deadfinder.analyzer.parser import SourceFile, dialect_for
from tests.conftest import make_source


def source(display_path, text=''):
    return make_source(text, display_path)


class TestCandidateSpellings:
    def test_spellings_for_nested_file(self):
        builder = DependencyGraphBuilder('src')
        spellings = builder.candidate_spellings(source('lib/format.ts'))
        assert './format' in spellings['exact']
        assert './format.ts' in spellings['exact']
        assert 'lib/format' in spellings['exact']
        assert '@/lib/format' in spellings['exact']
        assert spellings['bare'] == ['format', 'format.ts']

    @pytest.mark.parametrize('importer_text', [
        "import { formatPrice } from '../lib/format';",
        'import { formatPrice } from "@/lib/format";',
        "import './format.ts';",
        "const mod = await import('./format');",
        "const { formatPrice } = require('../../lib/format');",
        "export { formatPrice } from './lib/format';",
    ])
    def test_import_shapes(self, importer_text):
        pattern = DependencyGraphBuilder('src').import_pattern(source('lib/format.ts'))
        assert pattern.search(importer_text)

    @pytest.mark.parametrize('importer_text', [
        "import { formatPrice } from '../lib/formatter';",
        "const label = 'format';",
        "import { format } from 'date-fns';",
    ])
    def test_non_matching_text(self, importer_text):
        pattern = DependencyGraphBuilder('src').import_pattern(source('lib/format.ts'))
        assert not pattern.search(importer_text)


class TestBuildGraph:
    def test_edges_point_from_importer(self):
        sources = [
            source('app/page.tsx', "import Hero from '../components/Hero';\n"),
            source('components/Hero.tsx', "export default function Hero() {}\n"),
            source('helper123.ts', "const value1 = 1;\n"),
        ]
        graph = DependencyGraphBuilder('src').build_graph(sources)
        assert set(graph.nodes) == {s.path for s in sources}
        assert graph.has_edge('src/app/page.tsx', 'src/components/Hero.tsx')
        assert graph.in_degree('src/helper123.ts') == 0

    def test_self_import_ignored(self):
        sources = [source('loop.ts', "import './loop';\n")]
        graph = DependencyGraphBuilder('src').build_graph(sources)
        assert graph.in_degree('src/loop.ts') == 0


class TestOrphanExemptions:
    """Every exemption keeps an unimported file off the report."""

    @pytest.mark.parametrize('display_path, text', [
        ('app/dashboard/Chart.tsx', ''),
        ('page.tsx', ''),
        ('widgets/Button.tsx', 'export default function Button() {}'),
        ('legacy.js', 'module.exports = { run };'),
        ('shim.js', 'exports.run = run;'),
        ('types.ts', 'export interface Props { id: string }'),
        ('index.ts', ''),
        ('main.js', ''),
        ('siteConfig.ts', ''),
        ('setupTests.js', ''),
        ('utils/strings.ts', ''),
        ('hooks/useThing.ts', ''),
        ('services/api.ts', ''),
    ])
    def test_exempt(self, display_path, text):
        assert OrphanDetector('src').is_exempt(f'src/{display_path}', text)

    def test_plain_file_not_exempt(self):
        assert not OrphanDetector('src').is_exempt('src/helper123.ts', 'const value1 = 42;')


class TestDetectOrphans:
    def test_reports_orphan_with_size(self, write_tree):
        root = write_tree({
            'helper123.ts': 'const value1 = 42;\nconsole.log(value1);\n',
            'widgets/Card.tsx': "export default function Card() {}\n",
        })
        sources = [
            SourceFile(path=str(p), display_path=p.relative_to(root).as_posix(),
                       text=p.read_text(encoding='utf-8'), dialect=dialect_for(p))
            for p in sorted(root.rglob('*.ts*'))
        ]
        graph = DependencyGraphBuilder(str(root)).build_graph(sources)
        detector = OrphanDetector(str(root))
        orphans = detector.detect_orphans(graph)

        assert [o.display_path for o in orphans] == ['helper123.ts']
        assert orphans[0].size == os.path.getsize(root / 'helper123.ts')
        assert detector.warnings == []

    def test_stat_failure_is_a_warning(self, write_tree):
        root = write_tree({'helper123.ts': 'const value1 = 42;\n'})
        path = root / 'helper123.ts'
        loaded = SourceFile(path=str(path), display_path='helper123.ts',
                            text=path.read_text(encoding='utf-8'), dialect='typescript')
        path.unlink()

        graph = DependencyGraphBuilder(str(root)).build_graph([loaded])
        detector = OrphanDetector(str(root))
        assert detector.detect_orphans(graph) == []
        assert len(detector.warnings) == 1
        assert 'helper123.ts' in detector.warnings[0]
