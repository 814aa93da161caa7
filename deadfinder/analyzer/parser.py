"""Source loading and tree-sitter grammar selection for JS/TS dialects."""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from tree_sitter import Language, Parser, Tree
import tree_sitter_javascript as tsjavascript
import tree_sitter_typescript as tstypescript

from ..errors import FileReadFailure, ParseFailure


# Extension -> dialect. The javascript grammar accepts JSX natively.
DIALECTS = {
    '.js': 'javascript',
    '.jsx': 'javascript',
    '.mjs': 'javascript',
    '.cjs': 'javascript',
    '.ts': 'typescript',
    '.tsx': 'tsx',
}

MARKUP_DIALECTS = frozenset({'javascript', 'tsx'})


@dataclass(frozen=True)
class SourceFile:
    """A source file read once at the start of a run."""
    path: str  # Path as discovered (used as the file identity)
    display_path: str  # Path relative to the source root, for reports
    text: str
    dialect: str
    rule_path: Optional[str] = None  # Path seen by entry-point and directory rules

    @property
    def classification_path(self) -> str:
        """Path the entry-point and directory conventions are checked against."""
        return self.rule_path if self.rule_path is not None else self.display_path

    @property
    def markup(self) -> bool:
        """True if the dialect accepts embedded markup tags."""
        return self.dialect in MARKUP_DIALECTS


def dialect_for(file_path: str | Path) -> Optional[str]:
    """Infer the dialect from a file extension, or None if unsupported."""
    return DIALECTS.get(Path(file_path).suffix.lower())


def read_source_file(file_path: str | Path, src_dir: Optional[str | Path] = None,
                     root_inferred: bool = False) -> SourceFile:
    """Read a source file into an immutable SourceFile.

    Args:
        file_path: Path to the file
        src_dir: Source root used to compute the display path
        root_inferred: True if src_dir was guessed from the file set; the
            conventions then see the full path so a routing root is never cut off

    Returns:
        SourceFile for the path

    Raises:
        FileReadFailure: If the file is unsupported, unreadable or not UTF-8
    """
    file_path = Path(file_path)
    dialect = dialect_for(file_path)
    if dialect is None:
        raise FileReadFailure(file_path, f"unsupported extension '{file_path.suffix}'")

    try:
        text = file_path.read_text(encoding='utf-8')
    except UnicodeDecodeError as e:
        raise FileReadFailure(file_path, f"not valid UTF-8 ({e.reason})") from e
    except OSError as e:
        raise FileReadFailure(file_path, e.strerror or str(e)) from e

    display_path = file_path
    if src_dir is not None:
        try:
            display_path = file_path.relative_to(Path(src_dir))
        except ValueError:
            pass

    return SourceFile(
        path=str(file_path),
        display_path=display_path.as_posix(),
        text=text,
        dialect=dialect,
        rule_path=file_path.as_posix() if root_inferred else None,
    )


class LanguageParser:
    """Dialect-aware parser using the tree-sitter v0.22+ API."""

    _languages: dict = {}

    def __init__(self, dialect: str):
        """Initialize parser for a dialect.

        Args:
            dialect: One of 'javascript', 'typescript', 'tsx'

        Raises:
            ValueError: If the dialect is not supported
        """
        self.dialect = dialect
        self.parser = Parser(self._get_language(dialect))

    @classmethod
    def _get_language(cls, dialect: str) -> Language:
        """Load (once) the grammar for a dialect."""
        if dialect not in cls._languages:
            if dialect == 'javascript':
                capsule = tsjavascript.language()
            elif dialect == 'typescript':
                capsule = tstypescript.language_typescript()
            elif dialect == 'tsx':
                capsule = tstypescript.language_tsx()
            else:
                raise ValueError(f"Unsupported dialect: {dialect}")
            cls._languages[dialect] = Language(capsule)
        return cls._languages[dialect]

    def parse(self, source: SourceFile) -> Tree:
        """Parse a source file into a syntax tree.

        Args:
            source: File to parse

        Returns:
            Parsed Tree object

        Raises:
            ParseFailure: If the tree contains syntax errors
        """
        tree = self.parser.parse(source.text.encode('utf-8'))
        root = tree.root_node
        if root.has_error:
            raise ParseFailure(source.path, f"syntax error near line {self._first_error_line(root)}")
        return tree

    @staticmethod
    def _first_error_line(root) -> int:
        """Locate the first ERROR or MISSING node for the warning message."""
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type == 'ERROR' or node.is_missing:
                return node.start_point[0] + 1
            stack.extend(reversed([child for child in node.children if child.has_error or child.is_missing]))
        return root.start_point[0] + 1

    @classmethod
    def for_source(cls, source: SourceFile) -> 'LanguageParser':
        """Create a parser matching a source file's dialect."""
        return cls(source.dialect)
