"""End-to-end runs over realistic outline and snapshot fixtures."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from codoc.cli.app import app
from codoc.core.changes import analyze_outline_changes
from codoc.core.serialize import render_codoc
from codoc.core.snapshot import construct_forest, load_snapshot

runner = CliRunner()


def test_reorganized_outline(fixtures_dir: Path) -> None:
    before = (fixtures_dir / "before.codoc").read_text(encoding="utf-8")
    after = (fixtures_dir / "after.codoc").read_text(encoding="utf-8")

    report = analyze_outline_changes(before, after)

    moves = {(p.from_node.path, p.to_node.path) for p in report.diff.renamed}
    assert moves == {
        ("src/services/auth.ts#refreshToken", "src/services/session.ts#refreshToken"),
        ("src/utils.ts#validateInput", "src/helpers.ts#validateInput"),
    }
    assert [n.path for n in report.diff.added] == [
        "src/services/auth.ts#@helpers.validateInput",
        "src/services/session.ts",
        "src/helpers.ts",
    ]
    assert [n.path for n in report.diff.removed] == ["src/services/auth.ts#@utils.validateInput"]
    assert report.diff.modified == []
    assert sorted(c.type for c in report.changes) == ["add", "add", "add", "move", "move", "remove"]
    assert report.old_diagnostics == report.new_diagnostics == []


def test_outline_is_stable_under_its_own_diff(fixtures_dir: Path) -> None:
    text = (fixtures_dir / "after.codoc").read_text(encoding="utf-8")
    report = analyze_outline_changes(text, text)
    assert report.changes == []


def test_cli_diff_on_fixtures(fixtures_dir: Path) -> None:
    result = runner.invoke(app, ["diff", str(fixtures_dir / "before.codoc"), str(fixtures_dir / "after.codoc")])

    assert result.exit_code == 0
    assert "+ src/services/session.ts (relocated 1 items)" in result.output
    assert "+ src/helpers.ts (relocated 1 items)" in result.output
    assert "-       @utils.validateInput" in result.output


def test_snapshot_fixture_round_trips_through_outline(fixtures_dir: Path) -> None:
    forest = construct_forest(load_snapshot(fixtures_dir / "snapshot.json"))

    text = render_codoc(forest)

    assert text == (
        "/src\n"
        "  /services\n"
        "    auth.ts\n"
        "      $login()\n"
        "      $logout()\n"
        "  utils.ts\n"
        "    $validateInput()\n"
    )
    login = forest[0].children[0].children[0].children[0]
    assert login.dependencies == ["src/utils.ts:validateInput"]


def test_cli_snapshot_diff_against_itself(fixtures_dir: Path) -> None:
    path = fixtures_dir / "snapshot.json"

    result = runner.invoke(app, ["diff", "--snapshot", "--json", str(path), str(path)])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == []
