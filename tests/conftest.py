"""Shared fixtures for the dead finder test suite."""
from pathlib import Path

import pytest

from deadfinder.analyzer.parser import SourceFile, dialect_for

FIXTURES_DIR = Path(__file__).parent / 'fixtures'
NEXT_APP_SRC = FIXTURES_DIR / 'next_app' / 'src'


def make_source(text: str, display_path: str = 'sample.tsx') -> SourceFile:
    """Build an in-memory SourceFile (the path doubles as the display path)."""
    return SourceFile(
        path=f'src/{display_path}',
        display_path=display_path,
        text=text,
        dialect=dialect_for(display_path),
    )


@pytest.fixture
def write_tree(tmp_path):
    """Write ``{relative_path: text}`` under ``tmp_path/src`` and return the root."""
    def _write(files: dict) -> Path:
        root = tmp_path / 'src'
        for relative, text in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding='utf-8')
        return root
    return _write
