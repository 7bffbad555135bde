"""
Demonstration scenarios.

Each scenario builds a small object graph, states which identities are
expected to be duplicates, and can be checked against a real scan.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

import numpy as np
from rich.console import Console

from .core.identity import IdentityKey, Ref
from .core.introspect import typed_pointer_of
from .core.walker import find_duplicate_pointers
from .reporting import DuplicateReport


@dataclass
class Sample:
    """Record with a string, a pointer to a string, a self pointer and a list."""

    name: str
    name_alias: Optional[Ref] = None
    self_ref: Optional[Sample] = None
    values: List[Any] = field(default_factory=list)


@dataclass
class Scenario:
    title: str
    root: Any
    expected: List[IdentityKey]

    def run(self):
        return find_duplicate_pointers(self.root)

    def check(self) -> bool:
        """True if the scan flags exactly the expected identities."""
        result = self.run()
        flagged = {key for key, duplicate in result.items() if duplicate}
        return flagged == set(self.expected)


def _plain() -> Scenario:
    s = Sample("x")
    return Scenario("No aliasing", s, [])


def _name_alias() -> Scenario:
    s = Sample("x")
    s.name_alias = Ref(s, "name")
    return Scenario("Field pointer to s.name", s, [Ref(s, "name").key()])


def _self_pointer() -> Scenario:
    s = Sample("x")
    s.name_alias = Ref(s, "name")
    s.self_ref = s
    return Scenario(
        "Field pointer plus self pointer",
        s,
        [Ref(s, "name").key(), typed_pointer_of(s)],
    )


def _self_in_list() -> Scenario:
    s = Sample("x")
    s.values.append(s)
    return Scenario("Self pointer stored in a list", s, [typed_pointer_of(s)])


def _pointer_to_pointer() -> Scenario:
    s = Sample("x")
    s.values.append(Ref(s, "name_alias"))
    return Scenario("Pointer to the name_alias slot in a list", s, [Ref(s, "name_alias").key()])


def _shared_buffer() -> Scenario:
    points = np.zeros(4, dtype=[("x", "f8"), ("y", "f8")])
    holder = {"points": points, "xs": points["x"], "again": points[:]}
    return Scenario(
        "numpy view sharing a buffer; first-field view kept apart",
        holder,
        [typed_pointer_of(points)],
    )


SCENARIO_BUILDERS: List[Callable[[], Scenario]] = [
    _plain,
    _name_alias,
    _self_pointer,
    _self_in_list,
    _pointer_to_pointer,
    _shared_buffer,
]


def build_scenarios() -> List[Scenario]:
    return [builder() for builder in SCENARIO_BUILDERS]


def run_demo(console: Optional[Console] = None, show_all: bool = False) -> bool:
    """
    Scan every scenario and print its report.

    Returns:
        True if every scenario flagged exactly the expected identities
    """
    console = console or Console()
    all_passed = True
    for index, scenario in enumerate(build_scenarios(), start=1):
        report = DuplicateReport(scenario.run(), title=f"{index}. {scenario.title}")
        report.render(console, show_all=show_all)
        passed = scenario.check()
        all_passed = all_passed and passed
        status = "[green]as expected[/green]" if passed else "[red]unexpected result[/red]"
        console.print(f"   {status}\n")
    return all_passed
