"""Regex-based definition and usage extraction (no syntax tree).

Faster than the structural strategy and tolerant of files that do not
parse, at the cost of precision. Known limitations:

- comment stripping does not respect string or regex literals
- the top-level variable test counts braces, so multi-line literals that
  contain unbalanced brace characters can misplace a binding
- the same physical usage may be recorded under several context tags
"""
from .extractor import Definition, FileAnalysis, UsageOccurrence
from .heuristics import is_likely_component
from .parser import SourceFile
from . import patterns


class LexicalExtractor:
    """Apply layered regex templates to one file's raw text."""

    def analyze_file(self, source: SourceFile) -> FileAnalysis:
        """Extract definitions, exports and usages from a source file.

        Args:
            source: File to analyze

        Returns:
            FileAnalysis for the file
        """
        analysis = FileAnalysis(file_path=source.path)
        text = patterns.strip_comments(source.text)

        self._collect_components(text, source, analysis)
        self._collect_functions(text, source, analysis)
        self._collect_variables(text, source, analysis)
        self._collect_imports(text, source, analysis)
        self._collect_exports(text, analysis)
        self._collect_usages(text, source, analysis)

        return analysis.finalize()

    # --- Definitions ---

    def _define(self, analysis: FileAnalysis, source: SourceFile, name: str, kind: str, line: int):
        analysis.add_definition(Definition(
            name=name,
            kind=kind,
            file_path=source.path,
            line=line,
        ))

    def _collect_components(self, text: str, source: SourceFile, analysis: FileAnalysis):
        for pattern in patterns.COMPONENT_PATTERNS:
            for match in pattern.finditer(text):
                name = match.group(1)
                if analysis.is_defined(name):
                    continue
                # PascalCase alone is not enough; without markup signals it is a function
                kind = 'component' if is_likely_component(name, source.text, source.classification_path) else 'function'
                self._define(analysis, source, name, kind, patterns.line_at(text, match.start(1)))

    def _collect_functions(self, text: str, source: SourceFile, analysis: FileAnalysis):
        for pattern in patterns.FUNCTION_PATTERNS:
            for match in pattern.finditer(text):
                self._define(analysis, source, match.group(1), 'function',
                             patterns.line_at(text, match.start(1)))

    def _collect_variables(self, text: str, source: SourceFile, analysis: FileAnalysis):
        for pattern in patterns.VARIABLE_PATTERNS:
            for match in pattern.finditer(text):
                if not self._is_top_level(text, match.start()):
                    continue
                self._define(analysis, source, match.group(1), 'variable',
                             patterns.line_at(text, match.start(1)))

    @staticmethod
    def _is_top_level(text: str, index: int) -> bool:
        """Approximate "outside any function body" by brace depth."""
        before = text[:index]
        return before.count('{') - before.count('}') <= 0

    def _collect_imports(self, text: str, source: SourceFile, analysis: FileAnalysis):
        for match in patterns.NAMED_IMPORT_RE.finditer(text):
            line = patterns.line_at(text, match.start())
            for name in patterns.split_import_list(match.group(1)):
                self._define(analysis, source, name, 'import', line)

        for match in patterns.DEFAULT_IMPORT_RE.finditer(text):
            line = patterns.line_at(text, match.start())
            self._define(analysis, source, match.group(1), 'import', line)
            if match.group(2):
                for name in patterns.split_import_list(match.group(2)):
                    self._define(analysis, source, name, 'import', line)
            if match.group(3):
                self._define(analysis, source, match.group(3), 'import', line)

        for regex in (patterns.NAMESPACE_IMPORT_RE, patterns.REQUIRE_IMPORT_RE):
            for match in regex.finditer(text):
                self._define(analysis, source, match.group(1), 'import',
                             patterns.line_at(text, match.start()))

    def _collect_exports(self, text: str, analysis: FileAnalysis):
        for match in patterns.EXPORTED_DECLARATION_RE.finditer(text):
            analysis.add_export(match.group(1))

        for match in patterns.EXPORT_CLAUSE_RE.finditer(text):
            clause = match.group(0)
            inner = clause[clause.index('{') + 1:-1]
            for item in inner.split(','):
                # export { local as public }: the local name is what is defined here
                local = item.strip().split(' as ')[0].strip()
                if local.startswith('type '):
                    local = local[len('type '):].strip()
                if local:
                    analysis.add_export(local)

        for match in patterns.EXPORT_DEFAULT_NAME_RE.finditer(text):
            analysis.add_export(match.group(1))

    # --- Usages ---

    def _collect_usages(self, text: str, source: SourceFile, analysis: FileAnalysis):
        masked = patterns.mask_declaration_sites(patterns.mask_imports(text))

        for context, pattern in patterns.USAGE_PATTERNS:
            for match in pattern.finditer(masked):
                for group_index in range(1, (pattern.groups or 0) + 1):
                    name = match.group(group_index)
                    if not name:
                        continue
                    analysis.add_usage(UsageOccurrence(
                        name=name,
                        file_path=source.path,
                        line=patterns.line_at(masked, match.start(group_index)),
                        context=context,
                    ))
