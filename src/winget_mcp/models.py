"""
All dataclasses for the system. No dependencies on implementation modules.
"""
from __future__ import annotations
from dataclasses import dataclass, field

# One decoded table row: column name -> trimmed cell text, in column order.
Record = dict[str, str]


# =============================================================================
# TABLE LAYOUT MODELS
# =============================================================================

@dataclass(frozen=True)
class ColumnHeader:
    """A column token taken from the header line above the dash separator."""
    name: str     # Trimmed column name
    span: str     # Token as it appeared in the header, trailing padding included
    start: int    # Codepoint offset of the token within the header line

    @property
    def width(self) -> int:
        """Column width in codepoints (name plus padding)."""
        return len(self.span)

    @property
    def end(self) -> int:
        return self.start + self.width


# Ordered left to right; at least two columns.
ColumnLayout = list[ColumnHeader]


# =============================================================================
# INVOCATION MODELS
# =============================================================================

@dataclass
class CommandResult:
    """Captured output of one winget invocation."""
    args: list[str]
    returncode: int
    lines: list[str] = field(default_factory=list)   # stdout split into lines
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0
