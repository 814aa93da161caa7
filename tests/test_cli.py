"""Tests for the typer CLI."""
import json

import pytest
from typer.testing import CliRunner

from deadfinder import main
from deadfinder.config import __version__
from deadfinder.main import app
from deadfinder.utils.safe_console import SafeConsole
from tests.conftest import NEXT_APP_SRC

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.delenv("DEADFINDER_CONFIG", raising=False)
    # Wide console so long paths and messages are not wrapped
    monkeypatch.setattr(main, "console", SafeConsole(width=200))
    monkeypatch.chdir(tmp_path)


class TestScan:
    def test_report(self):
        result = runner.invoke(app, ["scan", "--src", str(NEXT_APP_SRC)])
        assert result.exit_code == 0, result.output
        assert "Summary" in result.output
        assert "UnusedBanner" in result.output
        assert "truncateLabel" in result.output
        assert "helper123.ts" in result.output
        assert "Potential Savings" in result.output

    def test_lexical_mode_alias(self):
        result = runner.invoke(app, ["scan", "-s", str(NEXT_APP_SRC), "-m", "regex"])
        assert result.exit_code == 0, result.output
        assert "lexical analysis" in result.output

    def test_json_output(self):
        result = runner.invoke(app, ["scan", "--src", str(NEXT_APP_SRC), "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data['strategy'] == 'structural'
        assert [f['display_path'] for f in data['unused_files']] == ['helper123.ts']

    def test_limit_truncates(self, write_tree):
        root = write_tree({
            'many.ts': ''.join(f"function unused{i}() {{}}\n" for i in range(5)),
        })
        result = runner.invoke(app, ["scan", "--src", str(root), "--limit", "2"])
        assert result.exit_code == 0, result.output
        assert "... and 3 more" in result.output

    def test_config_file_used(self, tmp_path):
        (tmp_path / 'deadcoderc.json').write_text(
            json.dumps({'srcDir': str(NEXT_APP_SRC), 'analysisMode': 'regex'}), encoding='utf-8')
        result = runner.invoke(app, ["scan", "--json"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)['strategy'] == 'lexical'

    def test_missing_source_directory(self, tmp_path):
        result = runner.invoke(app, ["scan", "--src", str(tmp_path / 'nope')])
        assert result.exit_code == 1
        assert "does not exist" in result.output

    def test_invalid_mode(self):
        result = runner.invoke(app, ["scan", "--src", str(NEXT_APP_SRC), "--mode", "magic"])
        assert result.exit_code == 1
        assert "Unknown analysis strategy" in result.output


class TestInit:
    def test_creates_sample(self, tmp_path):
        result = runner.invoke(app, ["init", "-o", "custom.json"])
        assert result.exit_code == 0, result.output
        assert json.loads((tmp_path / 'custom.json').read_text(encoding='utf-8'))['analysisMode'] == 'ast'

    def test_existing_file(self, tmp_path):
        (tmp_path / 'deadcoderc.json').write_text('{}', encoding='utf-8')
        result = runner.invoke(app, ["init"])
        assert result.exit_code == 1
        assert "already exists" in result.output

        result = runner.invoke(app, ["init", "--force"])
        assert result.exit_code == 0


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.output
