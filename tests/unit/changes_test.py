"""Tests for outline and snapshot change analysis."""

from datetime import datetime, timezone

from codoc.core.builder import parse_codoc
from codoc.core.changes import analyze_outline_changes, analyze_snapshot_changes, extract_node_block
from codoc.models import CodebaseSnapshot

STAMP = datetime(2026, 5, 1, tzinfo=timezone.utc)


class TestExtractNodeBlock:
    def test_leaf_returns_its_line(self) -> None:
        text = "/src\n  a.ts\n    $f()\n/lib"
        node = parse_codoc(text).all_nodes[2]
        assert extract_node_block(node, text.split("\n")) == "    $f()"

    def test_container_includes_deeper_lines(self) -> None:
        text = "/src\n  a.ts\n\n    $f()\n/lib"
        node = parse_codoc(text).nodes[0]
        assert extract_node_block(node, text.split("\n")) == "/src\n  a.ts\n\n    $f()"

    def test_out_of_range_line(self) -> None:
        node = parse_codoc("/src").nodes[0]
        assert extract_node_block(node, []) == ""


class TestAnalyzeOutlineChanges:
    def test_added_file_carries_its_block(self) -> None:
        report = analyze_outline_changes("/src", "/src\n  a.ts\n    $f()", timestamp=STAMP)

        assert [c.type for c in report.changes] == ["add", "add"]
        assert report.changes[0].content == "  a.ts\n    $f()"
        assert report.changes[1].content == "    $f()"
        assert all(c.timestamp == STAMP for c in report.changes)

    def test_removed_node_uses_old_text(self) -> None:
        report = analyze_outline_changes("a.ts\n  $gone()", "a.ts")

        assert [c.type for c in report.changes] == ["remove"]
        assert report.changes[0].content == "  $gone()"

    def test_diagnostics_from_both_versions(self) -> None:
        report = analyze_outline_changes("  a.ts", "/src\n  bad")

        assert len(report.old_diagnostics) == 1
        assert report.new_diagnostics[0].severity == "error"

    def test_no_changes(self, sample_outline: str) -> None:
        report = analyze_outline_changes(sample_outline, sample_outline)

        assert report.diff.is_empty()
        assert report.changes == []
        assert report.refactors == []


def _snapshot(element_name: str) -> CodebaseSnapshot:
    return CodebaseSnapshot.model_validate(
        {
            "files": [
                {
                    "path": "src/auth.ts",
                    "contentHash": "same",
                    "elements": [{"name": element_name, "type": "function", "content": "return token"}],
                }
            ]
        }
    )


class TestAnalyzeSnapshotChanges:
    def test_renamed_function(self) -> None:
        report = analyze_snapshot_changes(_snapshot("login"), _snapshot("signIn"), timestamp=STAMP)

        assert [c.type for c in report.changes] == ["rename"]
        change = report.changes[0]
        assert change.from_name == "login"
        assert change.to_name == "signIn"
        assert change.content == "$signIn()"
        assert change.original_content == "$login()"

    def test_identical_snapshots(self) -> None:
        report = analyze_snapshot_changes(_snapshot("login"), _snapshot("login"))
        assert report.changes == []
