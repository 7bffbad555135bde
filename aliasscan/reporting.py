"""Rendering of scan results as rich tables, plain text or JSON."""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from rich.console import Console
from rich.table import Table
from rich import box
from rich.markup import escape

from .core.identity import IdentityKey, describe_type


@dataclass
class ReportRow:
    """One identity in a scan result."""

    key: IdentityKey
    duplicate: bool

    @property
    def type_name(self) -> str:
        return describe_type(self.key.element_type)

    @property
    def address(self) -> str:
        return f"0x{self.key.address.base:x}"

    @property
    def member(self) -> Optional[str]:
        return self.key.address.member

    def to_dict(self) -> Dict[str, Any]:
        data = self.key.to_dict()
        data["duplicate"] = self.duplicate
        return data


class DuplicateReport:
    """
    Report over a ``find_duplicate_pointers`` result.

    Args:
        result: Mapping of identity key to is-duplicate flag
        title: Heading used by the table and text renderers
    """

    def __init__(self, result: Mapping[IdentityKey, bool], title: str = "Duplicate references"):
        self.title = title
        self.rows: List[ReportRow] = [ReportRow(key, bool(flag)) for key, flag in result.items()]

    @property
    def duplicate_rows(self) -> List[ReportRow]:
        return [row for row in self.rows if row.duplicate]

    @property
    def has_duplicates(self) -> bool:
        return any(row.duplicate for row in self.rows)

    def summary(self) -> Dict[str, int]:
        duplicates = len(self.duplicate_rows)
        return {
            "identities": len(self.rows),
            "duplicates": duplicates,
            "unique": len(self.rows) - duplicates,
        }

    def _selected(self, show_all: bool) -> List[ReportRow]:
        return self.rows if show_all else self.duplicate_rows

    def to_table(self, show_all: bool = False) -> Table:
        """Build a rich table of duplicate (or all) identities."""
        table = Table(title=self.title, box=box.SIMPLE_HEAVY)
        table.add_column("Type", style="cyan")
        table.add_column("Address", style="magenta")
        table.add_column("Member", style="green")
        table.add_column("Duplicate", justify="center")

        for row in self._selected(show_all):
            table.add_row(
                escape(row.type_name),
                row.address,
                escape(row.member or ""),
                "[bold red]yes[/bold red]" if row.duplicate else "no",
            )
        return table

    def render(self, console: Optional[Console] = None, show_all: bool = False) -> None:
        """Print the table and a one-line summary."""
        console = console or Console()
        stats = self.summary()
        if not self._selected(show_all):
            console.print(f"[green]No duplicate references among {stats['identities']} identities[/green]")
            return
        console.print(self.to_table(show_all))
        console.print(
            f"{stats['duplicates']} duplicate(s) among {stats['identities']} identities"
        )

    def to_text(self, show_all: bool = False) -> str:
        lines = [self.title]
        for row in self._selected(show_all):
            marker = "DUP" if row.duplicate else "   "
            lines.append(f"  {marker} {row.key.describe()}")
        stats = self.summary()
        lines.append(f"{stats['duplicates']} duplicate(s) among {stats['identities']} identities")
        return "\n".join(lines)

    def to_json(self, show_all: bool = False, indent: int = 2) -> str:
        payload = {
            "title": self.title,
            "summary": self.summary(),
            "identities": [row.to_dict() for row in self._selected(show_all)],
        }
        return json.dumps(payload, indent=indent)
