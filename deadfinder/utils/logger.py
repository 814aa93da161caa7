"""Windows-safe output handling with Unicode fallback for terminal compatibility.

Detects terminal encoding and provides ASCII alternatives for the status icons
the CLI prints, so non-UTF-8 terminals do not crash. Also wires the standard
``logging`` module to a Rich handler on the same safe console.
"""
import locale
import logging
import sys

from rich.logging import RichHandler


# Unicode to ASCII icon mapping for non-UTF-8 terminals
ICON_MAP = {
    '✓': '[OK]',   # check mark
    '✗': '[FAIL]',  # ballot x
    '⚠': '[WARN]',  # warning sign
    '•': '-',
}


def detect_terminal_encoding() -> str:
    """Detect the terminal's encoding capability.

    Returns:
        str: Terminal encoding ('utf-8', 'cp1252', 'ascii', etc.)
    """
    if getattr(sys.stdout, 'encoding', None):
        return sys.stdout.encoding.lower()

    try:
        return locale.getpreferredencoding().lower()
    except (AttributeError, ValueError):
        return 'ascii'


def is_utf8_capable() -> bool:
    """Check if the terminal can handle UTF-8 Unicode characters."""
    return detect_terminal_encoding() in ('utf-8', 'utf8', 'utf_8')


def sanitize_for_terminal(text: str) -> str:
    """Replace Unicode icons with ASCII equivalents if terminal doesn't support UTF-8.

    Args:
        text: Text potentially containing Unicode icons

    Returns:
        str: Sanitized text safe for current terminal
    """
    if is_utf8_capable():
        return text

    sanitized = text
    for unicode_char, ascii_replacement in ICON_MAP.items():
        sanitized = sanitized.replace(unicode_char, ascii_replacement)
    return sanitized


class SanitizingFilter(logging.Filter):
    """Strip icons from log messages on non-UTF-8 terminals."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = sanitize_for_terminal(record.msg)
        return True


def setup_logging(level: str | int = "WARNING", console=None) -> logging.Logger:
    """Route ``deadfinder`` log records to a Rich handler.

    Calling it again replaces the previous handler, so the level can be
    changed between CLI invocations in one process.

    Args:
        level: Log level name or number
        console: Console to write to (defaults to a stderr SafeConsole)

    Returns:
        The package logger
    """
    from .safe_console import SafeConsole

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    package_logger = logging.getLogger("deadfinder")
    for handler in list(package_logger.handlers):
        if isinstance(handler, RichHandler):
            package_logger.removeHandler(handler)

    handler = RichHandler(
        console=console or SafeConsole(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.addFilter(SanitizingFilter())
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    return package_logger
