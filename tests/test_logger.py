"""Tests for terminal sanitizing and logging setup."""
import io
import logging
from pathlib import Path

from rich.logging import RichHandler

from deadfinder import main
from deadfinder.utils import logger as logger_module
from deadfinder.utils.safe_console import SafeConsole


def test_sanitize_on_non_utf8_terminal(monkeypatch):
    monkeypatch.setattr(logger_module, 'is_utf8_capable', lambda: False)
    assert logger_module.sanitize_for_terminal('✓ done • next') == '[OK] done - next'


def test_sanitize_passthrough_on_utf8_terminal(monkeypatch):
    monkeypatch.setattr(logger_module, 'is_utf8_capable', lambda: True)
    assert logger_module.sanitize_for_terminal('✓ done') == '✓ done'


def test_setup_logging_replaces_handler():
    buffer = io.StringIO()
    console = SafeConsole(file=buffer, width=200)

    logger_module.setup_logging('INFO', console=console)
    package_logger = logger_module.setup_logging('DEBUG', console=console)

    rich_handlers = [h for h in package_logger.handlers if isinstance(h, RichHandler)]
    assert len(rich_handlers) == 1
    assert package_logger.level == logging.DEBUG

    logging.getLogger('deadfinder.analyzer.engine').warning('Could not read broken.ts')
    assert 'Could not read broken.ts' in buffer.getvalue()

    logger_module.setup_logging('WARNING')


def test_unknown_level_defaults_to_warning():
    package_logger = logger_module.setup_logging('CHATTY')
    assert package_logger.level == logging.WARNING


def test_icon_map_covers_cli_output():
    """Every non-ASCII character the CLI prints has an ASCII fallback."""
    cli_text = Path(main.__file__).read_text(encoding='utf-8')
    printed = {ch for ch in cli_text if ord(ch) > 127}
    assert printed
    assert printed <= set(logger_module.ICON_MAP)


def test_report_is_ascii_on_non_utf8_terminal(monkeypatch):
    monkeypatch.setattr('deadfinder.utils.safe_console.is_utf8_capable', lambda: False)
    monkeypatch.setattr(logger_module, 'is_utf8_capable', lambda: False)
    buffer = io.StringIO()
    console = SafeConsole(file=buffer, width=200)

    console.print("[bold green]✓ No dead code found![/bold green]")
    assert buffer.getvalue().strip() == '[OK] No dead code found!'
