"""MCP server exposing winget's package tables as tools."""
import logging
import time

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from .config import Config
from .errors import ErrorSignatureDetected, TableParseError, WingetError
from .interfaces import PackageQueryProtocol
from .models import Record
from .signatures import load_error_signatures
from .winget_client import WingetClient

logger = logging.getLogger(__name__)

MAX_SEARCH_COUNT = 1000

mcp = FastMCP("winget-mcp")

# Lazy initialization
_client = None


def _get_client() -> PackageQueryProtocol:
    global _client
    if _client is None:
        config = Config.load()
        logging.getLogger("winget_mcp").setLevel(config.logging_level())
        for error in config.validate():
            logger.warning(f"Config: {error}")
        signatures = load_error_signatures(config.error_signatures_path)
        _client = WingetClient(
            executable=config.winget_path,
            timeout=config.command_timeout,
            error_signatures=signatures,
            accept_source_agreements=config.accept_source_agreements,
            force_utf8=config.force_utf8_console,
            default_source=config.default_source,
        )
    return _client


def _describe_error(e: WingetError) -> str:
    """Turn a winget/decoding failure into a message for the MCP client."""
    if isinstance(e, ErrorSignatureDetected):
        return f"winget reported: {e.signature}"
    if isinstance(e, TableParseError):
        return f"Could not decode winget output ({e.reason.value}): {e.message}"
    return str(e)


def _run_query(name: str, call) -> list[Record]:
    """Run a client call, converting WingetError into ToolError."""
    start = time.perf_counter()
    try:
        records = call()
    except WingetError as e:
        logger.info(f"{name} failed: {e}")
        raise ToolError(_describe_error(e)) from e
    logger.debug(f"{name}: {len(records)} records in {time.perf_counter() - start:.3f}s")
    return records


def _validate_count(count: int | None) -> None:
    if count is not None and not 1 <= count <= MAX_SEARCH_COUNT:
        raise ToolError(f"count must be between 1 and {MAX_SEARCH_COUNT}, got {count}")


@mcp.tool()
def search_packages(
    query: str,
    exact: bool = False,
    source: str | None = None,
    count: int | None = None,
) -> list[dict]:
    """
    Search winget sources for packages.

    Args:
        query: Package name, id or moniker to search for
        exact: Match the query exactly (case-sensitive)
        source: Restrict to one source (e.g. "winget", "msstore")
        count: Maximum number of results (1-1000)

    Returns:
        One dict per result row, keyed by winget's column headers
        (typically Name, Id, Version, Match, Source)
    """
    if not query or not query.strip():
        raise ToolError("query must not be empty")
    _validate_count(count)
    client = _get_client()
    return _run_query(
        "search_packages",
        lambda: client.search(query.strip(), exact=exact, source=source, count=count),
    )


@mcp.tool()
def list_installed_packages(
    query: str | None = None,
    source: str | None = None,
) -> list[dict]:
    """
    List packages installed on this machine.

    Args:
        query: Optional filter on name, id or moniker
        source: Restrict to packages from one source

    Returns:
        One dict per installed package, keyed by winget's column headers
        (typically Name, Id, Version, Available, Source)
    """
    client = _get_client()
    return _run_query(
        "list_installed_packages",
        lambda: client.list_installed(query.strip() if query else None, source=source),
    )


@mcp.tool()
def list_upgradable_packages(include_unknown: bool = False) -> list[dict]:
    """
    List installed packages that have an upgrade available.

    Args:
        include_unknown: Also include packages whose installed version
            cannot be determined

    Returns:
        One dict per package, keyed by winget's column headers
        (typically Name, Id, Version, Available, Source)
    """
    client = _get_client()
    return _run_query(
        "list_upgradable_packages",
        lambda: client.list_upgrades(include_unknown=include_unknown),
    )


@mcp.tool()
def list_sources() -> list[dict]:
    """
    List the package sources winget is configured with.

    Returns:
        One dict per source, keyed by winget's column headers
        (typically Name, Argument)
    """
    client = _get_client()
    return _run_query("list_sources", client.list_sources)


def main():
    mcp.run()


if __name__ == "__main__":
    main()
