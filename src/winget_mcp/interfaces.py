"""
Protocol definitions for the components that touch the outside world.
Lets the server and tests swap in fakes for the winget client.
"""
from typing import Protocol
from .models import Record


class PackageQueryProtocol(Protocol):
    """Interface for the table-producing winget commands."""

    def search(
        self,
        query: str,
        exact: bool = False,
        source: str | None = None,
        count: int | None = None,
    ) -> list[Record]:
        """Search configured sources for packages."""
        ...

    def list_installed(self, query: str | None = None, source: str | None = None) -> list[Record]:
        """List installed packages."""
        ...

    def list_upgrades(self, include_unknown: bool = False) -> list[Record]:
        """List installed packages with an available upgrade."""
        ...

    def list_sources(self) -> list[Record]:
        """List configured sources."""
        ...
