"""Tests for DuplicateReport rendering."""

import json

from rich.console import Console

from aliasscan.core.identity import Address, IdentityKey
from aliasscan.reporting import DuplicateReport


def _result():
    return {
        IdentityKey(list, Address(0x10)): True,
        IdentityKey(str, Address(0x20, "name")): False,
        IdentityKey(dict, Address(0x30)): False,
    }


class TestDuplicateReport:
    """Test summaries and output formats."""

    def test_summary(self):
        report = DuplicateReport(_result())
        assert report.summary() == {"identities": 3, "duplicates": 1, "unique": 2}
        assert report.has_duplicates
        assert [row.type_name for row in report.duplicate_rows] == ["list"]

    def test_row_fields(self):
        row = DuplicateReport(_result()).rows[1]
        assert row.address == "0x20"
        assert row.member == "name"
        assert row.to_dict() == {"type": "str", "address": "0x20", "member": "name", "duplicate": False}

    def test_json_lists_duplicates_only_by_default(self):
        payload = json.loads(DuplicateReport(_result(), title="T").to_json())
        assert payload["title"] == "T"
        assert payload["summary"]["duplicates"] == 1
        assert [item["type"] for item in payload["identities"]] == ["list"]

    def test_json_show_all(self):
        payload = json.loads(DuplicateReport(_result()).to_json(show_all=True))
        assert len(payload["identities"]) == 3

    def test_text_marks_duplicates(self):
        text = DuplicateReport(_result(), title="T").to_text(show_all=True)
        lines = text.splitlines()
        assert lines[0] == "T"
        assert lines[1].strip() == "DUP list @ 0x10"
        assert "str @ 0x20:name" in lines[2]
        assert lines[-1] == "1 duplicate(s) among 3 identities"

    def test_render_table(self):
        console = Console(record=True, width=120)
        DuplicateReport(_result(), title="Shared").render(console)
        output = console.export_text()
        assert "Shared" in output
        assert "0x10" in output
        assert "0x20" not in output

    def test_render_without_duplicates(self):
        console = Console(record=True, width=120)
        DuplicateReport({IdentityKey(list, Address(1)): False}).render(console)
        assert "No duplicate references among 1 identities" in console.export_text()

    def test_empty_result(self):
        report = DuplicateReport({})
        assert not report.has_duplicates
        assert report.summary() == {"identities": 0, "duplicates": 0, "unique": 0}
