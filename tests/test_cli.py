"""Tests for the CLI entry point."""

from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

import pytest

ts = pytest.importorskip("tree_sitter", reason="tree-sitter not installed")


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """Create a minimal React project for CLI tests."""
    src = tmp_path / "src"
    src.mkdir()
    (src / "App.jsx").write_text(
        'import { Button } from "@acme/ui";\n'
        "\n"
        "export const App = () => (\n"
        "  <Layout.Header>\n"
        '    <Button size="sm" />\n'
        "    <Button />\n"
        "  </Layout.Header>\n"
        ");\n"
    )
    return tmp_path


def run_cli(*args: str) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, "-m", "componentscan.cli", *args],
        capture_output=True,
        text=True,
        timeout=30,
    )


class TestRun:
    def test_default_processor(self, sample_project: Path) -> None:
        result = run_cli("run", str(sample_project / "src"))

        assert result.returncode == 0
        data = json.loads(result.stdout)
        assert data == {"Button": {"instances": 2, "props": {"size": 1}}}
        assert "Scanned 1/1 files" in result.stderr

    def test_count_components(self, sample_project: Path) -> None:
        result = run_cli(
            "run",
            str(sample_project / "src"),
            "--processor",
            "count-components",
            "--include-sub-components",
        )

        assert result.returncode == 0
        assert json.loads(result.stdout) == {"Button": 2, "Layout.Header": 1}

    def test_components_option(self, sample_project: Path) -> None:
        result = run_cli(
            "run",
            str(sample_project / "src"),
            "--processor",
            "count-components",
            "--components",
            "Layout",
            "--include-sub-components",
        )

        assert json.loads(result.stdout) == {"Layout.Header": 1}

    def test_imported_from_regex(self, sample_project: Path) -> None:
        result = run_cli(
            "run",
            str(sample_project / "src"),
            "--processor",
            "count-components",
            "--imported-from",
            "/^@ACME/i",
        )

        assert json.loads(result.stdout) == {"Button": 2}

    def test_output_file(self, sample_project: Path) -> None:
        target = sample_project / "report.json"

        result = run_cli(
            "run", str(sample_project / "src"), "--processor", "raw-report", "-o", str(target)
        )

        assert result.returncode == 0
        assert result.stdout == ""
        data = json.loads(target.read_text())
        assert len(data["Button"]["instances"]) == 2

    def test_config_file(self, sample_project: Path) -> None:
        config = sample_project / "componentscan.json"
        config.write_text(
            json.dumps(
                {
                    "crawlFrom": "./src",
                    "processors": [["count-components", {"outputTo": "out/counts.json"}]],
                }
            )
        )

        result = run_cli("run", "-c", str(config))

        assert result.returncode == 0
        counts = json.loads((sample_project / "out" / "counts.json").read_text())
        assert counts == {"Button": 2}


    def test_flag_turns_off_config_sub_components(self, sample_project: Path) -> None:
        config = sample_project / "componentscan.json"
        config.write_text(
            json.dumps(
                {
                    "crawlFrom": "./src",
                    "includeSubComponents": True,
                    "processors": ["count-components"],
                }
            )
        )

        with_config = run_cli("run", "-c", str(config))
        overridden = run_cli("run", "-c", str(config), "--no-include-sub-components")

        assert json.loads(with_config.stdout) == {"Button": 2, "Layout.Header": 1}
        assert json.loads(overridden.stdout) == {"Button": 2}


class TestErrors:
    def test_no_command(self) -> None:
        result = run_cli()
        assert result.returncode == 1

    def test_no_path_or_config(self) -> None:
        result = run_cli("run")
        assert result.returncode == 1
        assert "Error:" in result.stderr

    def test_missing_directory(self, tmp_path: Path) -> None:
        result = run_cli("run", str(tmp_path / "missing"))
        assert result.returncode == 1
        assert "not a directory" in result.stderr

    def test_unknown_processor(self, sample_project: Path) -> None:
        result = run_cli("run", str(sample_project), "--processor", "nope")
        assert result.returncode == 1
        assert "Unknown processor" in result.stderr
