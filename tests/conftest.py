"""
Shared pytest fixtures for winget-mcp tests.

Tables are built the way winget renders them: every column except the last
is padded to a fixed *display* width, so cells containing double-width
glyphs get fewer padding spaces.
"""
from __future__ import annotations

import unicodedata

import pytest


def display_width(text: str) -> int:
    """Terminal cell count of ``text`` (wide/fullwidth glyphs count twice)."""
    return sum(2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1 for ch in text)


def format_row(cells: list[str], widths: list[int]) -> str:
    """Pad all but the last cell to its display width and join."""
    assert len(widths) == len(cells) - 1
    parts = [cell + " " * (width - display_width(cell)) for cell, width in zip(cells, widths)]
    parts.append(cells[-1])
    return "".join(parts)


def format_table(headers: list[str], widths: list[int], rows: list[list[str]]) -> list[str]:
    """Render a header, dash separator and rows as winget prints them."""
    header = format_row(headers, widths)
    return [header, "-" * len(header), *(format_row(r, widths) for r in rows)]


# =============================================================================
# Table builders
# =============================================================================

@pytest.fixture
def make_table():
    """Return the winget-style table renderer."""
    return format_table


# =============================================================================
# Captured output fixtures
# =============================================================================

SEARCH_HEADERS = ["Name", "Id", "Version", "Match", "Source"]
SEARCH_WIDTHS = [20, 28, 14, 18]
SEARCH_ROWS = [
    ["Visual Studio Code", "Microsoft.VisualStudioCode", "1.89.1", "Moniker: vscode", "winget"],
    ["VSCodium", "VSCodium.VSCodium", "1.89.1.24130", "", "winget"],
    ["Code Insiders", "Microsoft.VisualStudioCode.…", "1.90.0", "Tag: vscode", "winget"],
]

LIST_HEADERS = ["Name", "Id", "Version", "Available", "Source"]
LIST_WIDTHS = [24, 30, 14, 11]
LIST_ROWS = [
    ["카카오톡", "Kakao.KakaoTalk", "3.4.1", "", "winget"],
    ["微信", "Tencent.WeChat", "3.9.10", "3.9.11", "winget"],
    ["7-Zip 23.01 (x64)", "7zip.7zip", "23.01", "", "winget"],
    ["日本語入力", "Google.JapaneseIME", "2.28", "", ""],
]

PROGRESS_NOISE = [
    "   - ",
    "   \\ ",
    "  ██████████████████████████████  1024 KB / 1.00 MB",
]


@pytest.fixture
def search_output() -> list[str]:
    """``winget search vscode`` with spinner/progress lines above the table."""
    return PROGRESS_NOISE + format_table(SEARCH_HEADERS, SEARCH_WIDTHS, SEARCH_ROWS)


@pytest.fixture
def search_records() -> list[dict]:
    return [dict(zip(SEARCH_HEADERS, row)) for row in SEARCH_ROWS]


@pytest.fixture
def list_output() -> list[str]:
    """``winget list`` with CJK and Hangul package names."""
    return format_table(LIST_HEADERS, LIST_WIDTHS, LIST_ROWS)


@pytest.fixture
def list_records() -> list[dict]:
    return [dict(zip(LIST_HEADERS, row)) for row in LIST_ROWS]


@pytest.fixture
def upgrade_stdout(make_table) -> str:
    """Raw stdout of ``winget upgrade`` including spinner carriage returns and footer."""
    table = make_table(
        LIST_HEADERS,
        LIST_WIDTHS,
        [
            ["微信", "Tencent.WeChat", "3.9.10", "3.9.11", "winget"],
            ["Git", "Git.Git", "2.44.0", "2.45.1", "winget"],
        ],
    )
    return "\r   - \r   \\ \r" + "\n".join(table) + "\n2 upgrades available.\n"


@pytest.fixture
def signatures() -> frozenset[str]:
    return frozenset({
        "No package found matching input criteria.",
        "Failed when searching source",
    })
