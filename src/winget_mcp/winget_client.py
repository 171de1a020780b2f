"""Run winget and decode its table output."""
import logging
import re
import subprocess
import sys
from contextlib import contextmanager

from .errors import WingetNotFoundError, WingetTimeoutError
from .models import CommandResult, Record
from .signatures import check_error_signatures
from .table_parser import SEPARATOR_RE, parse_table

logger = logging.getLogger(__name__)

UTF8_CODE_PAGE = 65001

# Footers printed after the table, e.g. "3 upgrades available."
_TRAILER_RE = re.compile(r"^\d+ (upgrades? available|package\(s\))")


def _get_output_code_page() -> int:
    import ctypes
    return ctypes.windll.kernel32.GetConsoleOutputCP()


def _set_output_code_page(code_page: int) -> bool:
    import ctypes
    return bool(ctypes.windll.kernel32.SetConsoleOutputCP(code_page))


@contextmanager
def utf8_console_output(enabled: bool | None = None):
    """
    Force the console output code page to UTF-8 for the duration of a block.

    winget writes table text in the console's output code page; anything
    other than UTF-8 mangles non-Latin package names. The previous code page
    is restored on every exit path. No-op off Windows, and when no console
    is attached (GetConsoleOutputCP returns 0).

    Args:
        enabled: Override platform detection (defaults to Windows only).
    """
    if enabled is None:
        enabled = sys.platform == "win32"
    if not enabled:
        yield
        return

    previous = _get_output_code_page()
    if previous == 0:
        logger.debug("No console attached; leaving output code page unchanged")
        yield
        return

    if previous != UTF8_CODE_PAGE and not _set_output_code_page(UTF8_CODE_PAGE):
        logger.warning(f"Could not switch console output code page from {previous} to UTF-8")
    try:
        yield
    finally:
        if previous != UTF8_CODE_PAGE:
            _set_output_code_page(previous)


def strip_trailer(lines: list[str]) -> list[str]:
    """Drop footer text that winget prints after the table rows.

    The table ends at the first empty line after the separator; trailing
    summary lines such as ``3 upgrades available.`` are removed as well.
    Input without a separator is returned unchanged.
    """
    sep_index = next((i for i, line in enumerate(lines) if SEPARATOR_RE.match(line)), None)
    if sep_index is None:
        return list(lines)

    end = len(lines)
    for i in range(sep_index + 1, len(lines)):
        if not lines[i].strip():
            end = i
            break
    block = lines[:end]
    while len(block) > sep_index + 1 and _TRAILER_RE.match(block[-1].strip()):
        block.pop()
    return block


def decode_output(lines: list[str], error_signatures: frozenset[str] = frozenset()) -> list[Record]:
    """Decode captured winget output, footer included.

    Error signatures are checked against every captured line before the
    footer is cut, so a failure message printed after the table still
    rejects the output.
    """
    check_error_signatures(lines, error_signatures)
    return parse_table(strip_trailer(lines), error_signatures)


class WingetClient:
    """Invokes winget and decodes the tables it prints."""

    def __init__(
        self,
        executable: str = "winget",
        timeout: float = 60.0,
        error_signatures: frozenset[str] = frozenset(),
        accept_source_agreements: bool = True,
        force_utf8: bool = True,
        default_source: str | None = None,
    ):
        """
        Initialize the client.

        Args:
            executable: winget executable name or path
            timeout: Per-invocation timeout in seconds
            error_signatures: Substrings that mark a failed command
            accept_source_agreements: Pass --accept-source-agreements to
                commands that contact a source
            force_utf8: Switch the console to UTF-8 around each call
            default_source: Source used when a call does not name one
        """
        self.executable = executable
        self.timeout = timeout
        self.error_signatures = error_signatures
        self.accept_source_agreements = accept_source_agreements
        self.force_utf8 = force_utf8
        self.default_source = default_source

    def run(self, args: list[str]) -> CommandResult:
        """Run winget with ``args`` and capture stdout as lines.

        Lines are split with ``str.splitlines`` so the carriage returns that
        progress spinners emit end up as separate noise lines above the table.

        Raises:
            WingetNotFoundError: The executable could not be started.
            WingetTimeoutError: The process outlived ``timeout``.
        """
        cmd = [self.executable, *args]
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            with utf8_console_output(None if self.force_utf8 else False):
                proc = subprocess.run(
                    cmd,
                    capture_output=True,
                    encoding="utf-8",
                    errors="replace",
                    timeout=self.timeout,
                )
        except FileNotFoundError as e:
            raise WingetNotFoundError(f"winget executable not found: {self.executable}") from e
        except subprocess.TimeoutExpired as e:
            raise WingetTimeoutError(
                f"winget {' '.join(args)} timed out after {self.timeout}s"
            ) from e

        stdout = proc.stdout or ""
        result = CommandResult(
            args=list(args),
            returncode=proc.returncode,
            lines=stdout.splitlines(),
            stderr=proc.stderr or "",
        )
        if not result.ok:
            logger.debug(f"winget {' '.join(args)} exited with code {proc.returncode}")
        logger.debug(f"Captured {len(result.lines)} lines of output")
        return result

    def query(self, args: list[str]) -> list[Record]:
        """Run a table-producing command and decode its rows."""
        result = self.run(args)
        if not result.ok and not any(SEPARATOR_RE.match(line) for line in result.lines):
            logger.warning(
                f"winget {' '.join(args)} exited with code {result.returncode} and printed no table"
            )
        return decode_output(result.lines, self.error_signatures)

    def _source_args(self, source: str | None) -> list[str]:
        args = []
        source = source or self.default_source
        if source:
            args += ["--source", source]
        if self.accept_source_agreements:
            args.append("--accept-source-agreements")
        return args

    def search(
        self,
        query: str,
        exact: bool = False,
        source: str | None = None,
        count: int | None = None,
    ) -> list[Record]:
        """Search configured sources (``winget search``)."""
        args = ["search", query]
        if exact:
            args.append("--exact")
        if count is not None:
            args += ["--count", str(count)]
        return self.query(args + self._source_args(source))

    def list_installed(self, query: str | None = None, source: str | None = None) -> list[Record]:
        """List installed packages (``winget list``)."""
        args = ["list"]
        if query:
            args.append(query)
        return self.query(args + self._source_args(source))

    def list_upgrades(self, include_unknown: bool = False) -> list[Record]:
        """List packages with an available upgrade (``winget upgrade``)."""
        args = ["upgrade"]
        if include_unknown:
            args.append("--include-unknown")
        return self.query(args + self._source_args(None))

    def list_sources(self) -> list[Record]:
        """List configured sources (``winget source list``)."""
        return self.query(["source", "list"])
